"""mapperbridge - cross-references MyBatis mapper XML and Java mapper interfaces."""

__version__ = "0.1.0"
