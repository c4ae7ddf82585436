"""Result-page extraction for the supported patent sources."""

from .base import PageRequest, PageUnavailableError, RawFieldMap, ResultPageAdapter  # noqa: F401
from .document import DocumentHandle, NodeHandle, SoupDocument  # noqa: F401
from .google import GooglePatentsAdapter  # noqa: F401
from .resolver import Lookup, resolve_list, resolve_node, resolve_nodes, resolve_text  # noqa: F401
from .wipo import WipoPatentscopeAdapter  # noqa: F401
