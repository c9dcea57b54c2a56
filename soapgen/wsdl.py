import logging

from . import namespaces
from .builder import Builder
from .errors import NamespaceError, UnresolvedReference
from .model import (Binding, BindingOperation, BindingOperationComponent, Message, MessagePart, Port,
                    PortOperation, PortOperationComponent, Service, ServicePort)
from .schema import Context, SchemaWalker, children, expand_reference
from .source import DocumentSource
from .table import TypeTable

log = logging.getLogger(__name__)


class Wsdl(object):
    def __init__(self, url, target_namespace='', prefixes=None):
        self.url = url
        self.target_namespace = target_namespace
        self.prefixes = prefixes or {}
        self.messages = []
        self.ports = []
        self.bindings = []
        self.services = []
        self.elements = []
        self.types = []
        self.table = None

    def build(self):
        return Builder(self).build()

    def find_binding(self, name):
        local = namespaces.split(name)[1]
        for binding in self.bindings:
            if binding.name == local:
                return binding
        raise UnresolvedReference(name, 'binding')

    def find_port(self, name):
        local = namespaces.split(name)[1]
        for port in self.ports:
            if port.name == local:
                return port
        raise UnresolvedReference(name, 'port type')

    def __repr__(self):
        return 'Wsdl(url={!r})'.format(self.url)


class WsdlParser(object):
    def __init__(self, source=None, strict=None, max_depth=None):
        self.source = source or DocumentSource()
        self.strict = strict
        self.max_depth = max_depth

    def parse(self, url):
        root = self.source.fetch(url)
        prefixes = namespaces.prefix_map(root)
        if namespaces.NAMESPACES['wsdl'] not in prefixes.values():
            raise NamespaceError('Could not find namespace for wsdl in {}'.format(url))

        wsdl = Wsdl(url, root.get('targetNamespace', ''), prefixes)
        walker = SchemaWalker(self.source, Context(), strict=self.strict, max_depth=self.max_depth)

        for index, schema in enumerate(self.find(root, 'types', 'schema')):
            elements, types = walker.walk(schema, schema.get('targetNamespace', ''), '{}#{}'.format(url, index))
            wsdl.elements.extend(elements)
            wsdl.types.extend(types)

        wsdl.messages = [self.parse_message(elm, wsdl.target_namespace) for elm in self.find(root, 'message')]
        wsdl.ports = [self.parse_port(elm) for elm in self.find(root, 'portType')]
        wsdl.bindings = [self.parse_binding(elm) for elm in self.find(root, 'binding')]
        wsdl.services = [self.parse_service(elm) for elm in self.find(root, 'service')]

        wsdl.table = TypeTable.build(wsdl.elements, wsdl.types, wsdl.target_namespace)
        log.info('Parsed %s: %d elements, %d types, %d messages', url,
                 len(wsdl.elements), len(wsdl.types), len(wsdl.messages))
        return wsdl

    @staticmethod
    def find(root, *path):
        xpath = '/'.join('wsdl:' + p if i == 0 else 'xs:' + p for i, p in enumerate(path))
        ns = {'wsdl': namespaces.NAMESPACES['wsdl'], 'xs': namespaces.XS}
        return root.xpath(xpath, namespaces=ns)

    @staticmethod
    def parse_message(elm, target_namespace=''):
        message = Message(name=elm.get('name', ''))
        for tag, child in children(elm):
            if tag != 'part':
                continue
            part = MessagePart(name=child.get('name', ''))
            if child.get('element'):
                part.element = expand_reference(child.get('element'), child, target_namespace)
            if child.get('type'):
                part.type = expand_reference(child.get('type'), child, target_namespace)
            message.parts.append(part)
        return message

    @staticmethod
    def parse_port(elm):
        port = Port(name=elm.get('name', ''))
        for tag, child in children(elm):
            if tag != 'operation':
                continue
            op = PortOperation(name=child.get('name', ''))
            for tag, component in children(child):
                if tag in ('input', 'output', 'fault'):
                    setattr(op, tag, PortOperationComponent(message=component.get('message', ''),
                                                            name=component.get('name', '')))
            port.operations.append(op)
        return port

    @staticmethod
    def parse_binding(elm):
        binding = Binding(name=elm.get('name', ''), type=elm.get('type', ''))
        for tag, child in children(elm):
            if tag != 'operation':
                continue
            op = BindingOperation(name=child.get('name', ''))
            for tag, component in children(child):
                if tag == 'operation':
                    op.soap_action = component.get('soapAction', '')
                elif tag in ('input', 'output', 'fault'):
                    setattr(op, tag, WsdlParser.parse_binding_components(component))
            binding.operations.append(op)
        return binding

    @staticmethod
    def parse_binding_components(elm):
        ret = []
        for tag, child in children(elm):
            component = BindingOperationComponent(tag=tag,
                                                  use=child.get('use', ''),
                                                  message=child.get('message', ''),
                                                  name=child.get('name', ''))
            for key in ('part', 'parts'):
                if child.get(key):
                    component.parts.append(child.get(key))
            ret.append(component)
        return ret

    @staticmethod
    def parse_service(elm):
        service = Service(name=elm.get('name', ''))
        for tag, child in children(elm):
            if tag != 'port':
                continue
            port = ServicePort(name=child.get('name', ''), binding=child.get('binding', ''))
            for tag, address in children(child):
                if tag == 'address':
                    port.address = address.get('location', '')
            service.ports.append(port)
        return service
