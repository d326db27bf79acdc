"""Language modes — per file type syntax used by the built-in host."""
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

PROG = "prog"
TEXT = "text"
MARKUP = "markup"


@dataclass(frozen=True)
class Mode:
    name: str
    kind: str
    extensions: Tuple[str, ...] = ()
    line_comments: Tuple[str, ...] = ()
    block_comments: Tuple[Tuple[str, str], ...] = ()
    string_delimiters: Tuple[str, ...] = ()
    doc_strings: bool = False

    @property
    def prose(self) -> bool:
        return self.kind != PROG


C_LIKE = dict(
    line_comments=("//",),
    block_comments=(("/*", "*/"),),
    string_delimiters=('"', "'"),
)

MODES = (
    Mode("python", PROG, (".py", ".pyi"), ("#",), (),
         ('"""', "'''", '"', "'"), doc_strings=True),
    Mode("javascript", PROG, (".js", ".jsx", ".mjs", ".cjs"),
         C_LIKE["line_comments"], C_LIKE["block_comments"], ('"', "'", "`")),
    Mode("typescript", PROG, (".ts", ".tsx"),
         C_LIKE["line_comments"], C_LIKE["block_comments"], ('"', "'", "`")),
    Mode("c", PROG, (".c", ".h", ".cc", ".cpp", ".hpp", ".cxx", ".java", ".cs", ".css"), **C_LIKE),
    Mode("go", PROG, (".go",), C_LIKE["line_comments"], C_LIKE["block_comments"], ('"', "`")),
    Mode("rust", PROG, (".rs",), C_LIKE["line_comments"], C_LIKE["block_comments"], ('"',)),
    Mode("ruby", PROG, (".rb",), ("#",), (("=begin", "=end"),), ('"', "'")),
    Mode("shell", PROG, (".sh", ".bash", ".zsh"), ("#",), (), ('"', "'")),
    Mode("yaml", PROG, (".yml", ".yaml"), ("#",), (), ('"', "'")),
    Mode("json", PROG, (".json",), (), (), ('"',)),
    Mode("elisp", PROG, (".el",), (";",), (), ('"',)),
    Mode("html", MARKUP, (".html", ".htm"), (), (("<!--", "-->"),)),
    Mode("xml", MARKUP, (".xml", ".svg", ".xsl"), (), (("<!--", "-->"),)),
    Mode("vue", MARKUP, (".vue",), (), (("<!--", "-->"),)),
    Mode("jinja", MARKUP, (".jinja", ".jinja2", ".j2"), (), (("<!--", "-->"),)),
    Mode("markdown", TEXT, (".md", ".markdown")),
    Mode("org", TEXT, (".org",)),
    Mode("text", TEXT, (".txt", ".rst")),
)

MODE_BY_NAME: Dict[str, Mode] = {m.name: m for m in MODES}
_MODE_BY_EXTENSION: Dict[str, Mode] = {ext: m for m in MODES for ext in m.extensions}

TEXT_MODE = MODE_BY_NAME["text"]


def mode_for_path(path: Optional[str]) -> Mode:
    if not path:
        return TEXT_MODE
    ext = os.path.splitext(path)[1].lower()
    return _MODE_BY_EXTENSION.get(ext, TEXT_MODE)
