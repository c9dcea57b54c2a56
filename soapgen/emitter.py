import io, logging, textwrap

from .builder import Alias, Primitive, Record

log = logging.getLogger(__name__)

HEADER = '''\
# Generated by soapgen from {source}. Do not edit.

from __future__ import annotations

'''


class Emitter(object):
    """Renders the declarations of a finished Builder as a Python module."""

    def __init__(self, builder, source=None):
        self.builder = builder
        self.source = source or builder.wsdl.url

    def render(self):
        sink = io.StringIO()
        self.write(sink)
        return sink.getvalue()

    def save(self, path):
        text = self.render()
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        log.info('Wrote %d types to %s', len(self.builder.types), path)

    def write(self, sink):
        sink.write(HEADER.format(source=self.source))
        for module in self.imports():
            sink.write('import {}\n'.format(module))

        for decl in self.builder.ordered():
            sink.write('\n\n')
            if isinstance(decl, Alias):
                sink.write(self.format_alias(decl))
            else:
                sink.write(self.format_record(decl))

        if self.builder.vars:
            sink.write('\n\n')
            for name, decl in self.builder.vars.items():
                sink.write('{} = {}\n'.format(name, decl.name))

        sink.write('\n\nOPERATIONS = [\n')
        for op in self.builder.operations:
            sink.write('    {!r},\n'.format(dict(op._asdict())))
        sink.write(']\n')

    def imports(self):
        modules = {'dataclasses', 'typing'}
        types = [decl.target for decl in self.builder.types.values() if isinstance(decl, Alias)]
        types.extend(self.builder.vars.values())
        for decl in self.builder.types.values():
            if isinstance(decl, Record):
                types.extend(field.type for field in decl.fields.values())
        for type_ in types:
            if isinstance(type_, Primitive) and type_.module:
                modules.add(type_.module)
        return sorted(modules)

    @staticmethod
    def format_annotation(field):
        annotation = field.type.name
        if field.repeated:
            annotation = 'typing.List[{}]'.format(annotation)
        if not field.required:
            annotation = 'typing.Optional[{}]'.format(annotation)
        return annotation

    @staticmethod
    def format_field(field):
        metadata = {'name': field.tag, 'kind': field.kind, 'namespace': field.namespace}
        if field.required:
            value = 'dataclasses.field(metadata={!r})'.format(metadata)
        else:
            value = 'dataclasses.field(default=None, metadata={!r})'.format(metadata)
        return '{}: {} = {}\n'.format(field.name, Emitter.format_annotation(field), value)

    @staticmethod
    def format_record(decl):
        lines = ['"""{}"""\n'.format(decl.qname)]
        if decl.fields:
            lines.append('\n')
        lines.extend(Emitter.format_field(field) for field in decl.fields.values())
        base = decl.base.name if decl.base is not None else 'object'
        return '@dataclasses.dataclass(kw_only=True)\nclass {}({}):\n{}'.format(
            decl.name, base, textwrap.indent(''.join(lines), '    '))

    @staticmethod
    def format_alias(decl):
        lines = ['# {}\n'.format(decl.qname)]
        if decl.enumeration:
            lines.append('# enumeration: {}\n'.format(', '.join(repr(v) for v in decl.enumeration)))
        if decl.pattern is not None:
            lines.append('# pattern: {!r}\n'.format(decl.pattern))
        lines.append('{} = {}\n'.format(decl.name, decl.target.name))
        return ''.join(lines)
