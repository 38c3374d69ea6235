"""pkgdag: transitive Go package import graph explorer."""

__version__ = "0.1.0"
