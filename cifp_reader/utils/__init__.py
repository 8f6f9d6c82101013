"""
Helpers shared by the models and sources: geodesy, fix resolution and
AIRAC cycle arithmetic.

Submodules are imported directly (``from cifp_reader.utils import geodesy``);
``fix_resolver`` depends on the models and is not imported here.
"""
