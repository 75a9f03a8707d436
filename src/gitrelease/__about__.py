"""Program metadata for gitrelease."""

__version__ = "2.2.0"
__self__ = "gitrelease"
__banner__ = "Now for Darwinians and Tuxedos :)"
