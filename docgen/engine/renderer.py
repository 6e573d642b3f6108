"""Template rendering.

Two paths are offered:

* render_template() produces a full DOCX through docxtpl. LeaseDocxTemplate
  rewrites the lease placeholder syntax as Jinja2 in the document, header
  and footer parts before docxtpl renders them.
* preview_template_content() works on extracted plain text with simple
  string replacement and never touches a package.

Both degrade gracefully on missing data: an unresolved {{name}} becomes the
literal text [name] so partially completed leases still produce a draft.
"""

import io
import logging
import re
from collections.abc import Mapping
from typing import Any

from docxtpl import DocxTemplate
from jinja2 import Environment, TemplateError, Undefined
from lxml import etree
from markupsafe import Markup

from docgen.core.exceptions import DocumentEngineError, RenderError
from docgen.engine.catalog import get_sample_data
from docgen.engine.extractor import SIMPLE_VARIABLE_PATTERN, extract_variables
from docgen.engine.models import PreviewResult
from docgen.engine.package import Package

logger = logging.getLogger(__name__)

# Lease tokens in run-joined markup, in the order they are tried
_TOKEN_PATTERN = re.compile(
    r"\{\{(?:#(?P<open>\w+)|/(?P<close>\w+)|@(?P<raw>[\w.]+)|(?P<name>[\w.]+))\}\}"
)

# Jinja2 openers typed as document text. docxtpl turns {_{ and {_% back
# into {{ and {% after rendering.
_LITERAL_OPENER_PATTERN = re.compile(r"\{[{%#]")
_ESCAPED_OPENERS = {"{{": "{_{", "{%": "{_%", "{#": '{{ "{#" }}'}

_CONDITIONAL_BLOCK_PATTERN = re.compile(r"\{\{#(\w+)\}\}(.*?)\{\{/\1\}\}", re.DOTALL)


class PlaceholderUndefined(Undefined):
    """Undefined value that renders as its bracketed name, e.g. [tenant_name]."""

    __slots__ = ()

    def __str__(self) -> str:
        return f"[{self._undefined_name}]"

    def __bool__(self) -> bool:
        return False


def stringify_value(value: Any) -> Any:
    """Convert a scalar data value to the text written into a document.

    Booleans render lowercase and integral floats drop their fraction.
    Undefined values pass through so Jinja2 can render them.
    """
    if isinstance(value, Undefined):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


def get_nested_value(data: Mapping[str, Any], path: str) -> Any:
    """Get a value from nested mappings using dot notation.

    Args:
        data: The data to walk.
        path: The dot-notation path (e.g. 'tenant.name').

    Returns:
        The value at the path, or None when any level is missing, None,
        or not a mapping. Never raises.
    """
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _build_environment() -> Environment:
    return Environment(
        autoescape=True,
        undefined=PlaceholderUndefined,
        finalize=stringify_value,
        keep_trailing_newline=True,
    )


_environment = _build_environment()


def translate_tokens(src_xml: str) -> str:
    """Rewrite lease tokens in run-joined markup as docxtpl Jinja2 tags.

    {{name}} becomes a value lookup and {{#name}}...{{/name}} an if block.
    {{@name}} becomes a docxtpl paragraph tag, so the raw markup replaces
    the paragraph holding the token. Jinja2 openers typed as text are
    escaped so they render literally.

    Raises:
        RenderError: If a closer does not match the innermost open block,
            or a block is left open.
    """
    open_blocks: list[str] = []
    pieces = []
    position = 0
    for match in _TOKEN_PATTERN.finditer(src_xml):
        pieces.append(_escape_literal(src_xml[position:match.start()]))
        pieces.append(_translate_token(match, open_blocks))
        position = match.end()
    pieces.append(_escape_literal(src_xml[position:]))

    if open_blocks:
        raise RenderError(f"Unclosed conditional block {{{{#{open_blocks[-1]}}}}}")
    return "".join(pieces)


def _escape_literal(text: str) -> str:
    return _LITERAL_OPENER_PATTERN.sub(lambda m: _ESCAPED_OPENERS[m.group(0)], text)


def _translate_token(match: re.Match, open_blocks: list[str]) -> str:
    if match.group("open"):
        open_blocks.append(match.group("open"))
        return f'{{% if value("{match.group("open")}") %}}'
    if match.group("close"):
        closer = match.group("close")
        if not open_blocks:
            raise RenderError(f"Unexpected closing tag {{{{/{closer}}}}}")
        opener = open_blocks.pop()
        if opener != closer:
            raise RenderError(
                f"Closing tag {{{{/{closer}}}}} does not match {{{{#{opener}}}}}"
            )
        return "{% endif %}"
    if match.group("raw"):
        return f'{{{{p raw_xml("{match.group("raw")}") }}}}'
    return f'{{{{ value("{match.group("name")}") }}}}'


class LeaseDocxTemplate(DocxTemplate):
    """DocxTemplate that understands the lease placeholder syntax."""

    def patch_xml(self, src_xml):
        # First pass joins tokens Word split across runs, second pass lifts
        # the {{p ...}} tags produced for raw tokens to paragraph level
        joined = super().patch_xml(src_xml)
        return super().patch_xml(translate_tokens(joined))


def _render_context(data: Mapping[str, Any]) -> dict[str, Any]:
    def value(path: str) -> Any:
        resolved = get_nested_value(data, path)
        if resolved is None:
            return _environment.undefined(name=path)
        return resolved

    def raw_xml(path: str) -> Markup:
        # Raw markup never falls back to [name]; that would corrupt the part
        resolved = get_nested_value(data, path)
        return Markup("" if resolved is None else resolved)

    return {"value": value, "raw_xml": raw_xml}


def render_template(buffer: bytes, data: Mapping[str, Any]) -> bytes:
    """Render a DOCX template with the provided data.

    Args:
        buffer: The DOCX template bytes.
        data: Flat or nested key/value data; nested values are addressed
            with dot notation in the template.

    Returns:
        The rendered DOCX as bytes.

    Raises:
        RenderError: If the package cannot be read, the placeholders are
            unbalanced, the template engine fails or the rendered markup
            is not well-formed. The underlying message is preserved.
    """
    logger.info(f"Rendering template with {len(data)} data keys")

    try:
        Package.open(buffer).require_document_parts()

        template = LeaseDocxTemplate(io.BytesIO(buffer))
        template.render(_render_context(data), _environment)
        output = io.BytesIO()
        template.save(output)
    except etree.XMLSyntaxError as e:
        logger.error(f"Rendered markup is not well-formed: {e}")
        raise RenderError(
            f"Failed to render template: rendered markup is not well-formed XML: {e}"
        ) from e
    except (DocumentEngineError, TemplateError, KeyError, TypeError, ValueError) as e:
        logger.error(f"Template rendering failed: {e}", exc_info=True)
        message = e.message if isinstance(e, DocumentEngineError) else str(e)
        raise RenderError(f"Failed to render template: {message}") from e

    rendered = output.getvalue()
    logger.info(f"Rendered template ({len(rendered)} bytes)")
    return rendered


def preview_template_content(content: str, data: Mapping[str, Any]) -> str:
    """Preview template text with data substituted (text only, no DOCX).

    Simple tokens are replaced first; unresolved ones become [name].
    Conditional blocks are then kept without their markers when the named
    key is truthy and removed with their content otherwise.

    Args:
        content: The template text content.
        data: The data to substitute.

    Returns:
        The preview text.
    """

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        value = get_nested_value(data, name)
        if value is None:
            return f"[{name}]"
        return str(stringify_value(value))

    def conditional(match: re.Match) -> str:
        return match.group(2) if data.get(match.group(1)) else ""

    preview = SIMPLE_VARIABLE_PATTERN.sub(substitute, content)
    return _CONDITIONAL_BLOCK_PATTERN.sub(conditional, preview)


def preview_template(content: str, data: Mapping[str, Any] | None = None) -> PreviewResult:
    """Preview template text and report which variables resolved.

    Args:
        content: The template text content.
        data: The data to substitute. Catalog sample data is used if None.

    Returns:
        PreviewResult with the preview text plus used and missing variables.
    """
    if data is None:
        data = get_sample_data()

    variables = extract_variables(content)
    used = [name for name in variables if get_nested_value(data, name) is not None]
    missing = [name for name in variables if name not in used]

    return PreviewResult(
        content=preview_template_content(content, data),
        used_variables=used,
        missing_variables=missing,
    )
