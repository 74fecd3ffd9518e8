"""
Assign the client-side alias of each service.

The alias ends up as ``service`` in the API metadata. Sources, in order:

1. the configured ``service_alias`` map (service name -> alias)
2. the entry name, for the only service of an entry file
3. the camel-cased service name
"""

from ...core import ir
from ...generator.utils import camel_case
from ..contexts import PARSE_ENTRY, ParseEntryContext
from ..program import Program, on


class ServiceAliasPlugin:
    def __init__(self, aliases: dict[str, str] | None = None):
        self.aliases = dict(aliases or {})

    def apply(self, program: Program) -> None:
        program.register(on(PARSE_ENTRY), self.parse_entry)

    def parse_entry(self, ctx: ParseEntryContext) -> ParseEntryContext:
        entry_names = {str(path): name for name, path in ctx.entries.items()}
        for document in ctx.ast:
            services = document.services
            entry_name = entry_names.get(document.idl_path)
            for service in services:
                service.alias = self.alias_for(service, entry_name if len(services) == 1 else None)
        return ctx

    def alias_for(self, service: ir.ServiceDefinition, entry_name: str | None) -> str:
        if service.name in self.aliases:
            return self.aliases[service.name]
        if service.alias:
            return service.alias
        if entry_name:
            return entry_name
        return camel_case(service.name)
