import collections, copy, reprlib

from . import namespaces


class OrderedSet(collections.OrderedDict):
    def add(self, key):
        self[key] = True
    @reprlib.recursive_repr()
    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, list(self.keys()))


class Model(object):
    fields = ()

    def __init__(self, **kwargs):
        for k in self.fields:
            # never share a mutable class-level default between instances
            setattr(self, k, copy.copy(getattr(type(self), k)))
        for k, v in kwargs.items():
            if k not in self.fields:
                raise TypeError('{} has no field {!r}'.format(type(self).__name__, k))
            setattr(self, k, v)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, ', '.join(
            '{}={!r}'.format(k, getattr(self, k)) for k in self.fields if getattr(self, k)))


class Element(Model):
    fields = ('source', 'namespace', 'name', 'type', 'min_occurs', 'max_occurs',
              'unbounded', 'ref_namespace', 'ref')
    source = ''
    namespace = ''
    name = ''
    type = ''
    min_occurs = 1
    max_occurs = 1
    unbounded = False
    ref_namespace = ''
    ref = ''

    @property
    def qname(self):
        return namespaces.qualify(self.namespace, self.name)

    @property
    def ref_qname(self):
        return namespaces.qualify(self.ref_namespace, self.ref)

    @property
    def is_reference(self):
        return bool(self.ref)

    @property
    def repeated(self):
        return self.unbounded or self.max_occurs > 1

    def requalified(self, old_namespace, new_namespace):
        if self.namespace != old_namespace:
            return self
        elem = copy.copy(self)
        elem.namespace = new_namespace
        return elem


class Attribute(Model):
    fields = ('name', 'namespace', 'type', 'use')
    name = ''
    namespace = ''
    type = ''
    use = 'optional'

    @property
    def required(self):
        return self.use == 'required'


class ElementType(Model):
    """A named schema type with no representable shape.

    Subclasses pick the shape once, when the schema is parsed.
    """
    kind = 'empty'
    fields = ('source', 'namespace', 'name', 'hint')
    source = ''
    namespace = ''
    name = ''
    hint = ''
    # the type an imported copy was made from
    origin = None

    @property
    def qname(self):
        return namespaces.qualify(self.namespace, self.name)

    @property
    def builtin(self):
        return ''

    def requalified(self, old_namespace, new_namespace):
        if self.namespace != old_namespace:
            return self
        tp = copy.copy(self)
        tp.namespace = new_namespace
        tp.origin = self.canonical
        return tp

    @property
    def canonical(self):
        return self.origin or self


class BuiltinType(ElementType):
    kind = 'builtin'
    fields = ElementType.fields + ('python_type',)
    python_type = None

    @property
    def builtin(self):
        return self.name


class ComplexType(ElementType):
    kind = 'complex'
    fields = ElementType.fields + ('sub_elements', 'choice_elements', 'attributes', 'base')
    sub_elements = []
    choice_elements = []
    attributes = collections.OrderedDict()
    base = ''


class RestrictedType(ElementType):
    kind = 'restriction'
    fields = ElementType.fields + ('base', 'enumeration', 'pattern')
    base = ''
    enumeration = []
    pattern = None


class MessagePart(Model):
    fields = ('name', 'element', 'type')
    name = ''
    element = ''
    type = ''


class Message(Model):
    fields = ('name', 'parts')
    name = ''
    parts = []


class PortOperationComponent(Model):
    fields = ('message', 'name')
    message = ''
    name = ''


class PortOperation(Model):
    fields = ('name', 'input', 'output', 'fault')
    name = ''
    input = None
    output = None
    fault = None


class Port(Model):
    fields = ('name', 'operations')
    name = ''
    operations = []


class BindingOperationComponent(Model):
    fields = ('tag', 'use', 'parts', 'message', 'name')
    tag = ''
    use = ''
    parts = []
    message = ''
    name = ''


class BindingOperation(Model):
    fields = ('name', 'soap_action', 'input', 'output', 'fault')
    name = ''
    soap_action = ''
    input = []
    output = []
    fault = []


class Binding(Model):
    fields = ('name', 'type', 'operations')
    name = ''
    type = ''
    operations = []


class ServicePort(Model):
    fields = ('name', 'binding', 'address')
    name = ''
    binding = ''
    address = ''


class Service(Model):
    fields = ('name', 'ports')
    name = ''
    ports = []
