"""libhtpasswd - read & write Apache htpasswd files"""

__version__ = "1.0.0"
