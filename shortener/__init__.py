"""Core business logic for URL shortener."""

__version__ = "1.0.0"

from .shortcode import ShortCodeGenerator  # noqa: E402
from .service import URLShortenerService  # noqa: E402
from .resolver import RedirectResolver  # noqa: E402

__all__ = ["ShortCodeGenerator", "URLShortenerService", "RedirectResolver", "__version__"]
