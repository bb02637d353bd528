"""localstore - portable paths, canonical errors and on-disk store opening.

- Paths are decomposed and joined the same way on every platform
- OS failures are reduced to a small set of canonical error kinds
- Stores are opened only after their directory tree is guaranteed to exist
"""

__version__ = "0.1.0"
