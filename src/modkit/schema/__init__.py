"""Schema composition -- load SDL fragments and merge them into one document.

Sub-modules:

* :mod:`~modkit.schema.loader` -- collect fragments from strings, files,
  directories, and URLs.
* :mod:`~modkit.schema.composer` -- merge fragments by declaration name.

Typical usage::

    from modkit.schema import load_type_definitions, merge_type_definitions

    sdl = merge_type_definitions(load_type_definitions(["schema/", extra_sdl]))
"""

from modkit.schema.composer import merge_documents, merge_type_definitions
from modkit.schema.loader import load_type_definitions

__all__ = ["load_type_definitions", "merge_documents", "merge_type_definitions"]
