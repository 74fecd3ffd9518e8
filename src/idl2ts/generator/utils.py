"""
Path and naming helpers shared by the emitters.
"""

import os
import re
from pathlib import Path

from ..core import ir
from ..core.parser import WELL_KNOWN_PREFIX

_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9_$]")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def relative_idl_path(document: ir.Document, idl_root: Path) -> Path:
    """Path of a document relative to the IDL root (file name only when outside it)."""
    path = Path(document.idl_path)
    try:
        return path.relative_to(idl_root)
    except ValueError:
        return Path(path.name)


def output_path_for(document: ir.Document, idl_root: Path, output_dir: Path, suffix: str = ".ts") -> Path:
    """Generated file path of a document, mirroring its place under the IDL root."""
    rel = relative_idl_path(document, idl_root)
    return output_dir / rel.parent / (rel.stem + suffix)


def import_path(from_file: Path, to_file: Path) -> str:
    """
    Module specifier of ``to_file`` as imported from ``from_file``.

    Always starts with ``./`` and has no extension, e.g. ``./../../base``.
    """
    name = to_file.name
    for suffix in (".d.ts", ".ts", ".js"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    rel = os.path.relpath(to_file.parent / name, from_file.parent)
    return "./" + Path(rel).as_posix()


def include_alias(include: str) -> str:
    """Import alias of an include: its file stem with non-identifier characters replaced."""
    alias = _NON_IDENTIFIER.sub("_", Path(include).stem)
    if alias and alias[0].isdigit():
        alias = "_" + alias
    return alias


def schema_root(document: ir.Document, idl_root: Path) -> str:
    """Schema id of a document, e.g. ``api://schemas/prompt_coze.loop.prompt.manage``."""
    rel = relative_idl_path(document, idl_root).with_suffix("")
    return "api://schemas/" + rel.as_posix().replace("/", "_")


def camel_case(name: str) -> str:
    """``PromptManageService`` -> ``promptManageService``, ``foo_bar`` -> ``fooBar``."""
    parts = [p for p in re.split(r"[_\-.\s]+", name) if p]
    if not parts:
        return name
    head, *rest = parts
    return head[0].lower() + head[1:] + "".join(p[0].upper() + p[1:] for p in rest)


def property_name(name: str) -> str:
    """Quote a property name when it is not a valid identifier."""
    if _IDENTIFIER.match(name):
        return name
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


def mock_name(name: str) -> str:
    """JavaScript binding name of a (possibly nested) declaration."""
    return name.replace(".", "_")


def is_well_known(include: str) -> bool:
    return include.startswith(WELL_KNOWN_PREFIX)
