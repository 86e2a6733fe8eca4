"""cmscore: HTTP response handling and ORM search contexts for a CMS-style web framework."""

__version__ = "1.0.0"
