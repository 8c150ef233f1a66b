"""
Detecting the package's own version.

The codebase does not contain the version directly: it is taken from
the installed distribution's metadata, once at startup when the code is loaded.
It is used for the ``User-Agent`` header and for ``kubeapply --version``.
"""
from typing import Optional

version: Optional[str] = None

try:
    import importlib.metadata
except ImportError:
    pass
else:
    try:
        name, *_ = __name__.split('.')  # usually "kubeapply", unless renamed/forked.
        version = importlib.metadata.version(name)
    except Exception:
        pass  # not installed, or installed in an unusual way.
