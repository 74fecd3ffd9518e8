"""
Client generation orchestrator.

``gen_client`` runs one generation:

1. resolve the configured entries against the IDL root
2. parse every entry and, transitively, its includes
3. trigger PARSE_ENTRY so plugins can transform the documents
4. trigger GEN_FILE_AST per document (and GEN_MOCK_FIELD per mocked field)
5. render API call sites, mocks, schemas and type patches
6. trigger WRITE_FILE per output file
7. write the files
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..core import ir
from ..core.errors import ResolutionError
from ..core.parser import parse_with_includes, resolve_include
from ..plugins.contexts import (
    GEN_FILE_AST,
    GEN_MOCK_FIELD,
    PARSE_ENTRY,
    WRITE_FILE,
    GenFileAstContext,
    GenMockFieldContext,
    ParseEntryContext,
    WriteFileContext,
)
from ..plugins.program import Program, on
from .mock_data import MOCK_UTILS, MOCK_UTILS_FILE, fallback_mock_value, render_mock_module
from .options import Options
from .schema import SchemaBuilder
from .session import GenerationSession
from .templates import ApiMeta, path_params, render_api, request_location
from .typescript import DeclarationRenderer, ModuleScope
from .utils import (
    camel_case,
    import_path,
    include_alias,
    is_well_known,
    output_path_for,
    property_name,
    schema_root,
)

logger = logging.getLogger(__name__)

# Runs after every plugin handler of the same phase.
FALLBACK_PRIORITY = 1000


@dataclass
class GenerationResult:
    """
    Result of a ``gen_client`` run.

    Attributes:
        documents: Documents after PARSE_ENTRY
        files_created: Paths written, in write order
        apis: Metadata of every generated API function
    """

    documents: list[ir.Document] = field(default_factory=list)
    files_created: list[Path] = field(default_factory=list)
    apis: list[ApiMeta] = field(default_factory=list)

    def add_file(self, path: Path) -> None:
        self.files_created.append(path)


def resolve_imports(
    document: ir.Document,
    by_path: dict[str, ir.Document],
    idl_root: Path,
) -> dict[str, ir.Document]:
    """
    Map the includes of a document to import aliases.

    Well-known Protobuf imports are skipped; alias clashes get a numeric
    suffix.
    """
    imports: dict[str, ir.Document] = {}
    for include in document.includes:
        if is_well_known(include):
            continue
        target = resolve_include(include, document.idl_path, idl_root)
        included = by_path.get(str(target))
        if included is None:
            logger.debug("Include %s of %s was not parsed", include, document.idl_path)
            continue
        base = alias = include_alias(include)
        counter = 1
        while alias in imports:
            alias = f"{base}_{counter}"
            counter += 1
        imports[alias] = included
    return imports


def request_fields(
    func: ir.FunctionDefinition, scope: ModuleScope
) -> tuple[list[ir.FieldDefinition], str]:
    """
    Request fields and TypeScript request type of a function.

    A single struct parameter is the request itself; anything else becomes
    an inline object type over the parameters.
    """
    if len(func.params) == 1 and func.params[0].type.kind == ir.TypeKind.REF:
        ref = scope.lookup(func.params[0].type.name)
        if ref is not None and isinstance(ref.declaration, ir.StructDefinition):
            return ref.declaration.fields, ref.ts_name
    if not func.params:
        return [], "{}"
    members = ", ".join(
        f"{property_name(p.name)}{'?' if p.is_optional else ''}: {scope.field_type(p)}"
        for p in func.params
    )
    return func.params, "{" + members + "}"


def build_api_meta(
    func: ir.FunctionDefinition,
    service: ir.ServiceDefinition,
    scope: ModuleScope,
    root: str,
) -> ApiMeta | None:
    """
    Build the metadata of one function.

    Returns:
        ApiMeta, or None when the function declares no route
    """
    ext = func.extension_config
    if ext is None:
        logger.debug("Skipping %s.%s: no route annotation", service.name, func.name)
        return None
    if not ext.uri:
        scope.session.warn_once(
            f"no-uri:{scope.document.idl_path}:{service.name}.{func.name}",
            "Skipping %s.%s: route declares a method but no uri",
            service.name,
            func.name,
        )
        return None

    method = ext.method or "POST"
    fields, req_type = request_fields(func, scope)
    url_params = set(path_params(ext.uri))
    mapping: dict[str, list[str]] = {}
    for f in fields:
        mapping.setdefault(request_location(f, url_params, method), []).append(f.name)

    extra = {k: v for k, v in ext.as_dict().items() if k not in ("method", "uri")}
    if service.extension_config is not None:
        for key, value in service.extension_config.as_dict().items():
            if key not in ("method", "uri"):
                extra.setdefault(key, value)

    return ApiMeta(
        name=func.name,
        url=ext.uri,
        method=method,
        req_type=req_type,
        res_type=scope.ts_type(func.return_type),
        req_mapping=mapping,
        schema_root=root,
        service=service.alias or camel_case(service.name),
        extra=extra,
        comments=func.comments,
    )


class CorePlugin:
    """
    Default handlers of the generation hooks.

    Always applied first, so every hook has a handler and user plugins can
    run around them with BEFORE/AFTER or other priorities.
    """

    def __init__(self) -> None:
        self._scopes: dict[str, ModuleScope] = {}
        self._by_path: dict[str, ir.Document] = {}

    def apply(self, program: Program) -> None:
        program.register(on(PARSE_ENTRY), self.parse_entry)
        program.register(on(GEN_FILE_AST), self.gen_file_ast)
        program.register(on(GEN_MOCK_FIELD), self.gen_mock_field, priority=FALLBACK_PRIORITY)
        program.register(on(WRITE_FILE), self.write_file)

    def scope_for(self, document: ir.Document, session: GenerationSession) -> ModuleScope:
        scope = self._scopes.get(document.idl_path)
        if scope is None or scope.document is not document:
            imports = resolve_imports(document, self._by_path, session.options.idl_root)
            scope = ModuleScope(document, imports, session)
            self._scopes[document.idl_path] = scope
        return scope

    def parse_entry(self, ctx: ParseEntryContext) -> ParseEntryContext:
        return ctx

    def write_file(self, ctx: WriteFileContext) -> WriteFileContext:
        return ctx

    def gen_file_ast(self, ctx: GenFileAstContext) -> GenFileAstContext:
        """Render the TypeScript module of ``ctx.document``."""
        self._by_path = {doc.idl_path: doc for doc in ctx.ast}
        session = ctx.session
        options = session.options
        scope = self.scope_for(ctx.document, session)
        root = schema_root(ctx.document, options.idl_root)

        def render_service(service: ir.ServiceDefinition) -> list[str]:
            if not options.gen_client:
                return []
            lines = []
            for func in service.functions:
                meta = build_api_meta(func, service, scope, root)
                if meta is not None:
                    ctx.apis.append(meta)
                    lines.append(render_api(meta, options.default_path_param_provider))
            return lines

        body = DeclarationRenderer(scope).render(render_service)

        header: list[str] = []
        for alias, included in scope.imports.items():
            target = output_path_for(included, options.idl_root, options.output_dir)
            header.append(f"import * as {alias} from '{import_path(ctx.output_path, target)}';")
            header.append(f"export {{ {alias} }};")
        if ctx.apis:
            names = ["createAPI"]
            provider = options.default_path_param_provider
            if provider and any(meta.unmapped_path_params for meta in ctx.apis):
                names.append(provider)
            common = options.common_code_path or options.output_dir / "config"
            header.append(f"import {{ {', '.join(names)} }} from '{import_path(ctx.output_path, common)}';")

        ctx.content = "\n".join(header + body) + "\n"
        return ctx

    def gen_mock_field(self, ctx: GenMockFieldContext) -> GenMockFieldContext:
        if ctx.output is None:
            ctx.output = fallback_mock_value(ctx, self.scope_for(ctx.document, ctx.session))
        return ctx


def _parse_entries(options: Options) -> list[ir.Document]:
    seen: dict[str, ir.Document] = {}
    documents: list[ir.Document] = []
    for entry in options.entries:
        documents.extend(
            parse_with_includes(
                options.resolve_entry(entry),
                options.idl_root,
                revise_tail_comment=options.revise_tail_comment,
                seen=seen,
            )
        )
    return documents


def _entry_names(options: Options) -> dict[str, Path]:
    if options.entry_names:
        return {name: options.resolve_entry(p).resolve() for name, p in options.entry_names.items()}
    return {p.stem: options.resolve_entry(p).resolve() for p in options.entries}


def gen_client(options: Options) -> GenerationResult:
    """
    Generate TypeScript clients for the configured entries.

    Args:
        options: Generation options; ``options.plugins`` are applied after
            the built-in core handlers

    Returns:
        GenerationResult with the documents, written files and API metadata

    Raises:
        ResolutionError: If an entry or include is missing
        ParseError: If an IDL file is malformed
        UnknownTypeError: If a field uses an unknown scalar keyword
        Idl2TsError: Plugin errors propagate unchanged
    """
    session = GenerationSession.from_options(options)
    core = CorePlugin()
    program = Program.create([core, *options.plugins])
    result = GenerationResult()

    if not options.entries:
        raise ResolutionError("No entries configured")

    documents = _parse_entries(options)
    logger.info("Parsed %d IDL files from %d entries", len(documents), len(options.entries))

    parse_ctx = program.trigger(
        PARSE_ENTRY,
        ParseEntryContext(
            ast=documents,
            files=session.files,
            entries=_entry_names(options),
            session=session,
        ),
    )
    documents = parse_ctx.ast
    result.documents = documents
    by_path = {doc.idl_path: doc for doc in documents}
    roots = {doc.idl_path: schema_root(doc, options.idl_root) for doc in documents}

    for document in documents:
        output_path = output_path_for(document, options.idl_root, options.output_dir)
        file_ctx = program.trigger(
            GEN_FILE_AST,
            GenFileAstContext(
                document=document,
                ast=documents,
                output_path=output_path,
                files=session.files,
                session=session,
            ),
        )
        if file_ctx.content is not None:
            session.files[output_path] = file_ctx.content
        result.apis.extend(file_ctx.apis)

        scope = core.scope_for(document, session)

        if options.gen_mock:
            mock_path = output_path_for(document, options.idl_root, options.output_dir, ".mock.js")
            import_mocks = {
                alias: output_path_for(doc, options.idl_root, options.output_dir, ".mock.js")
                for alias, doc in scope.imports.items()
            }
            session.files[mock_path] = render_mock_module(
                document,
                scope,
                program,
                mock_path,
                options.output_dir / MOCK_UTILS_FILE,
                import_mocks,
                file_ctx.apis,
            )

        if options.gen_schema:
            schema_path = output_path_for(document, options.idl_root, options.output_dir, ".schema.json")
            schema = SchemaBuilder(scope, roots).build(roots[document.idl_path])
            session.files[schema_path] = json.dumps(schema, indent=2, ensure_ascii=False) + "\n"

        if options.patch_types_output is not None:
            session.files.update(_render_patch_types(document, scope, options))

    if options.gen_mock:
        session.files[options.output_dir / MOCK_UTILS_FILE] = MOCK_UTILS

    if options.aggregation_export:
        session.files.update(_render_aggregation(parse_ctx.entries, by_path, options))

    for filename in list(session.files):
        write_ctx = program.trigger(
            WRITE_FILE,
            WriteFileContext(filename=filename, content=session.files[filename], session=session),
        )
        if write_ctx.filename != filename:
            del session.files[filename]
        session.files[write_ctx.filename] = write_ctx.content

    for path, content in session.files.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        result.add_file(path)

    logger.info("Wrote %d files to %s", len(result.files_created), options.output_dir)
    return result


def _render_patch_types(
    document: ir.Document, scope: ModuleScope, options: Options
) -> dict[Path, str]:
    assert options.patch_types_output is not None
    path = output_path_for(document, options.idl_root, options.patch_types_output, ".d.ts")
    lines: list[str] = []
    for alias, included in scope.imports.items():
        target = output_path_for(included, options.idl_root, options.patch_types_output, ".d.ts")
        lines.append(f"import * as {alias} from '{import_path(path, target)}';")
        lines.append(f"export {{ {alias} }};")
    lines.extend(DeclarationRenderer(scope, declaration_file=True).render())
    return {path: "\n".join(lines) + "\n"}


def _render_aggregation(
    entries: dict[str, Path], by_path: dict[str, ir.Document], options: Options
) -> dict[Path, str]:
    assert options.aggregation_export is not None
    index = options.output_dir / options.aggregation_export
    lines = []
    for name, entry in entries.items():
        document = by_path.get(str(entry))
        if document is None:
            continue
        target = output_path_for(document, options.idl_root, options.output_dir)
        lines.append(f"export * as {name} from '{import_path(index, target)}';")
    return {index: "\n".join(lines) + "\n"}
