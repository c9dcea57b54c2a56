import dateutil.relativedelta, datetime, decimal, logging

from . import namespaces
from .errors import UnresolvedReference
from .model import BuiltinType

log = logging.getLogger(__name__)

BUILTINS = {
    'string': str,
    'normalizedString': str,
    'token': str,
    'NMTOKEN': str,
    'NMTOKENS': str,
    'Name': str,
    'NCName': str,
    'QName': str,
    'ID': str,
    'IDREF': str,
    'ENTITY': str,
    'language': str,
    'anyURI': str,
    'boolean': bool,
    'decimal': decimal.Decimal,
    'float': float,
    'double': float,
    'duration': dateutil.relativedelta.relativedelta,
    'dateTime': datetime.datetime,
    'time': datetime.time,
    'date': datetime.date,
    'gYear': int,
    'gYearMonth': str,
    'gMonth': str,
    'gMonthDay': str,
    'gDay': str,
    'integer': int,
    'byte': int,
    'short': int,
    'int': int,
    'long': int,
    'unsignedByte': int,
    'unsignedShort': int,
    'unsignedInt': int,
    'unsignedLong': int,
    'negativeInteger': int,
    'positiveInteger': int,
    'nonNegativeInteger': int,
    'nonPositiveInteger': int,
    'base64Binary': bytes,
    'hexBinary': bytes,
    'anyType': object,
    'anySimpleType': str,
    }


def builtin_name(qname):
    """The built-in local name `qname` refers to, or None."""
    stripped = namespaces.strip_schema_namespace(qname)
    if not stripped.startswith(':'):
        return None
    local = stripped[1:]
    if local in BUILTINS:
        return local
    return None


class TypeTable(object):
    """Qualified name -> ElementType, looked up case-insensitively.

    Elements share the table but keep their own symbol space, so an element
    and a type with the same name can resolve to different types. Type
    lookups see types first; element resolution sees elements first.
    """

    def __init__(self, target_namespace=''):
        self.target_namespace = target_namespace
        self.types = {}
        self.elements = {}
        # elements typed as a built-in never get a table entry
        self.primitives = {}
        for name, python_type in BUILTINS.items():
            self.add(namespaces.qualify(namespaces.XS, name),
                     BuiltinType(namespace=namespaces.XS, name=name, python_type=python_type))

    @staticmethod
    def key(qname):
        namespace, local = namespaces.split_qname(qname)
        # older schema drafts share the built-ins of the current one
        if namespaces.is_schema_namespace(namespace):
            qname = namespaces.qualify(namespaces.XS, local)
        return qname.lower()

    def add(self, qname, tp):
        self.types[self.key(qname)] = tp

    def add_element(self, qname, tp):
        self.elements[self.key(qname)] = tp

    def __contains__(self, qname):
        key = self.key(qname)
        return key in self.types or key in self.elements

    def __len__(self):
        return len(self.types) + len(self.elements)

    def get(self, qname, default=None):
        key = self.key(qname)
        return self.types.get(key, self.elements.get(key, default))

    def lookup(self, qname, kind='type'):
        tp = self.get(qname)
        if tp is None:
            raise UnresolvedReference(qname, kind)
        return tp

    def resolve_element(self, qname):
        key = self.key(qname)
        builtin = self.primitives.get(key)
        if builtin is not None:
            return self.lookup(namespaces.qualify(namespaces.XS, builtin))
        tp = self.elements.get(key, self.types.get(key))
        if tp is None:
            raise UnresolvedReference(qname, 'element')
        return tp

    @classmethod
    def build(cls, elements, types, target_namespace):
        table = cls(target_namespace)
        for tp in types:
            if not tp.namespace:
                tp.namespace = target_namespace
            table.add(tp.qname, tp)

        for elem in elements:
            if not elem.namespace:
                elem.namespace = target_namespace

            namespace, local = namespaces.split_qname(elem.type)
            if not namespace:
                elem.type = namespaces.qualify(target_namespace, local)

            builtin = builtin_name(elem.type)
            if builtin is not None:
                table.primitives[cls.key(elem.qname)] = builtin
                continue

            table.add_element(elem.qname, table.lookup(elem.type))
        log.debug('Type table holds %d entries', len(table))
        return table
