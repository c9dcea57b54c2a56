import collections, keyword, logging, re

from . import namespaces
from .errors import UnresolvedReference

log = logging.getLogger(__name__)

Operation = collections.namedtuple('Operation', 'service port address name soap_action input output')

# modules the generated class bodies refer to
RESERVED = {'dataclasses', 'typing'}


def make_identifier(name):
    name = re.sub(r'\W', '_', name) or 'field'
    if name[0].isdigit():
        name = '_' + name
    if keyword.iskeyword(name) or name in RESERVED:
        name += '_'
    return name


def make_type_name(name):
    name = make_identifier(name)
    return name[0].upper() + name[1:]


class Primitive(object):
    """A Python type standing in for an XML-Schema built-in."""
    def __init__(self, python_type):
        self.python_type = python_type

    @property
    def module(self):
        module = self.python_type.__module__
        if module == 'builtins':
            return None
        return module

    @property
    def name(self):
        if self.module is None:
            return self.python_type.__name__
        return '{}.{}'.format(self.module, self.python_type.__qualname__)

    def __eq__(self, other):
        return isinstance(other, Primitive) and other.python_type is self.python_type

    def __hash__(self):
        return hash(self.python_type)

    def __repr__(self):
        return 'Primitive({})'.format(self.name)


class Field(object):
    def __init__(self, name, tag, type, kind='element', namespace='', required=True, repeated=False):
        self.name = name
        self.tag = tag
        self.type = type
        self.kind = kind
        self.namespace = namespace
        self.required = required
        self.repeated = repeated

    def __repr__(self):
        return 'Field({!r}, {!r}, {}, kind={!r}, required={!r}, repeated={!r})'.format(
            self.name, self.tag, self.type.name, self.kind, self.required, self.repeated)


class Declaration(object):
    def __init__(self, name, qname):
        self.name = name
        self.qname = qname

    def __repr__(self):
        return '{}({!r}, {!r})'.format(type(self).__name__, self.name, self.qname)


class Record(Declaration):
    def __init__(self, name, qname, base=None):
        super().__init__(name, qname)
        self.base = base
        self.fields = collections.OrderedDict()

    def add(self, field):
        name = base = make_identifier(field.name)
        n = 2
        while name in self.fields:
            name = '{}_{}'.format(base, n)
            n += 1
        field.name = name
        self.fields[name] = field
        return field


class Alias(Declaration):
    def __init__(self, name, qname, target=None, enumeration=(), pattern=None):
        super().__init__(name, qname)
        self.target = target
        self.enumeration = list(enumeration)
        self.pattern = pattern


class Builder(object):
    """Turns the resolved schema of a Wsdl into declarations.

    `types` holds one declaration per schema type in the order they were
    finished. A base can finish after its subclass when it has a field of
    the subclass type, so `ordered()` is what code generation walks.
    `vars` maps `<Message>_<Part>` to the declaration of each message part.
    """
    def __init__(self, wsdl):
        self.wsdl = wsdl
        self.table = wsdl.table
        self.types = collections.OrderedDict()
        self.vars = collections.OrderedDict()
        self.operations = []
        self._built = {}
        self._names = set()

    def build(self):
        for message in self.wsdl.messages:
            self.build_message(message)
        for service in self.wsdl.services:
            self.build_service(service)
        return self

    def build_message(self, message):
        log.info('Building message %s', message.name)
        for part in message.parts:
            if part.element:
                log.info('Building part %s of element %s', part.name, part.element)
                tp = self.table.resolve_element(part.element)
            elif part.type:
                log.info('Building part %s of type %s', part.name, part.type)
                tp = self.table.lookup(part.type)
            else:
                raise UnresolvedReference('{}/{}'.format(message.name, part.name), 'type of part')
            self.vars[make_type_name('{}_{}'.format(message.name, part.name))] = self.build_type(tp)

    def ordered(self):
        """Declarations with every base class and alias target ahead of its users."""
        done = collections.OrderedDict()

        def visit(decl):
            if decl.name in done:
                return
            depends = decl.base if isinstance(decl, Record) else decl.target
            if isinstance(depends, Declaration):
                visit(depends)
            done[decl.name] = decl

        for decl in self.types.values():
            visit(decl)
        return list(done.values())

    def synthesize(self, type_ref, kind='type'):
        return self.build_type(self.table.lookup(type_ref, kind))

    def build_type(self, tp):
        if tp.builtin:
            return Primitive(tp.python_type)

        # an imported type and its requalified copy share one declaration
        tp = tp.canonical
        key = self.table.key(tp.qname)
        if key in self._built:
            return self._built[key]

        log.debug('Building type %s', tp.qname)
        if tp.kind == 'restriction' and tp.base:
            decl = self._built[key] = Alias(self.allocate_name(tp), tp.qname, enumeration=tp.enumeration, pattern=tp.pattern)
            decl.target = self.synthesize(tp.base)
        elif tp.kind == 'complex':
            decl = self._built[key] = Record(self.allocate_name(tp), tp.qname)
            self.build_record(tp, decl)
        else:
            # nothing to represent; emitted as an empty record
            decl = self._built[key] = Record(self.allocate_name(tp), tp.qname)

        self.types[decl.name] = decl
        return decl

    def build_record(self, tp, decl):
        if tp.base:
            base = self.synthesize(tp.base)
            if isinstance(base, Record):
                decl.base = base
            else:
                decl.add(Field('value', '', base, kind='text'))

        for sub in tp.sub_elements:
            decl.add(self.build_field(sub, required=sub.min_occurs > 0))
        for sub in tp.choice_elements:
            decl.add(self.build_field(sub, required=False))
        for attr in tp.attributes.values():
            decl.add(Field(attr.name, attr.name, self.synthesize(attr.type, 'attribute type'),
                           kind='attribute', namespace=attr.namespace, required=attr.required))

    def build_field(self, sub, required):
        if sub.is_reference:
            type_ = self.build_type(self.table.resolve_element(sub.ref_qname))
            return Field(sub.ref, sub.ref, type_, namespace=sub.ref_namespace,
                         required=required, repeated=sub.repeated)

        namespace, local = namespaces.split_qname(sub.type)
        type_ref = sub.type
        if not namespace:
            type_ref = namespaces.qualify(sub.namespace or self.table.target_namespace, local)
        return Field(sub.name, sub.name, self.synthesize(type_ref), namespace=sub.namespace,
                     required=required, repeated=sub.repeated)

    def allocate_name(self, tp):
        name = base = make_type_name(tp.hint or tp.name)
        n = 2
        while name in self._names:
            name = '{}_{}'.format(base, n)
            n += 1
        self._names.add(name)
        return name

    def build_service(self, service):
        log.info('Building service %s', service.name)
        for port in service.ports:
            binding = self.wsdl.find_binding(port.binding)
            log.info('Binding %s found for port %s', binding.name, port.name)
            log.info('Port %s is at address %s', port.name, port.address)
            port_type = self.wsdl.find_port(binding.type)
            for op in binding.operations:
                self.build_operation(service, port, port_type, op)

    def build_operation(self, service, port, port_type, op):
        log.info('Building operation %s at %s', op.name, op.soap_action)
        input_message = output_message = ''
        for port_op in port_type.operations:
            if port_op.name == op.name:
                if port_op.input is not None:
                    input_message = namespaces.split(port_op.input.message)[1]
                if port_op.output is not None:
                    output_message = namespaces.split(port_op.output.message)[1]
        self.operations.append(Operation(service.name, port.name, port.address, op.name,
                                         op.soap_action, input_message, output_message))
