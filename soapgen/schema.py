import logging

from . import namespaces
from .errors import FetchError
from .model import Attribute, ComplexType, Element, ElementType, OrderedSet, RestrictedType

log = logging.getLogger(__name__)

# walks nested deeper than this are cut short instead of failing the run
MAX_DEPTH = 10
# an include/import without a schemaLocation is fatal unless this is off
STRICT_MODE = True

ANY_TYPE = namespaces.qualify(namespaces.XS, 'anyType')
STRING = namespaces.qualify(namespaces.XS, 'string')


class Context(object):
    """Walk state owned by a single parse."""
    def __init__(self):
        self.visited = OrderedSet()
        self.internal_id = 0

    def next_internal_name(self):
        name = 'internal_{}'.format(self.internal_id)
        self.internal_id += 1
        return name


def parse_occurs(value):
    try:
        occurs = int(value)
    except (TypeError, ValueError):
        return 1
    if occurs < 0:
        return 1
    return occurs


def children(node):
    for child in node:
        # skip comments and processing instructions
        if isinstance(child.tag, str):
            yield namespaces.local_name(child.tag), child


def expand_reference(token, node, target_namespace):
    # prefixes are the ones in scope at `node`; unprefixed QName values pick
    # up the default xmlns when there is one
    prefixes = namespaces.prefix_map(node)
    return namespaces.expand(token, prefixes, prefixes.get('', target_namespace))


class SchemaWalker(object):
    """Collects the elements and types declared by a schema and everything
    it includes or imports.
    """
    def __init__(self, source, context=None, strict=None, max_depth=None):
        self.source = source
        self.context = context or Context()
        self.strict = STRICT_MODE if strict is None else strict
        self.max_depth = MAX_DEPTH if max_depth is None else max_depth

    def walk(self, schema, target_namespace, source, depth=0):
        key = (target_namespace, source)
        if key in self.context.visited:
            log.debug('Already walked %s under %r', source, target_namespace)
            return [], []
        self.context.visited.add(key)

        if depth > self.max_depth:
            log.warning('Recursion depth reached at %s, skipping it', source)
            return [], []

        log.debug('Walking schema %s under %r', source, target_namespace)
        elements, types = [], []
        for tag, child in children(schema):
            if tag == 'include':
                sub_elements, sub_types = self.walk_include(child, target_namespace, source, depth)
                elements.extend(sub_elements)
                types.extend(sub_types)
            elif tag == 'import':
                sub_elements, sub_types = self.walk_import(child, target_namespace, source, depth)
                elements.extend(sub_elements)
                types.extend(sub_types)
            elif tag == 'element':
                elem, tps = self.parse_element(child, target_namespace, source)
                elements.append(elem)
                types.extend(tps)
            elif tag in ('simpleType', 'complexType'):
                types.extend(self.parse_type_element(child, target_namespace, source))
        return elements, types

    def walk_include(self, node, target_namespace, source, depth):
        doc, location = self.fetch(node, source)
        if doc is None:
            return [], []
        return self.walk(doc, target_namespace, location, depth + 1)

    def walk_import(self, node, target_namespace, source, depth):
        doc, location = self.fetch(node, source)
        if doc is None:
            return [], []
        their_namespace = doc.get('targetNamespace') or target_namespace
        elements, types = self.walk(doc, their_namespace, location, depth + 1)

        namespace = node.get('namespace', '')
        if not namespace or namespace == target_namespace:
            return elements, types
        # imported names are addressed through the importer's namespace; the
        # original names stay too so references inside the fragment resolve
        return (self.requalify(elements, namespace, target_namespace),
                self.requalify(types, namespace, target_namespace))

    @staticmethod
    def requalify(items, old_namespace, new_namespace):
        ret = []
        for item in items:
            ret.append(item)
            renamed = item.requalified(old_namespace, new_namespace)
            if renamed is not item:
                ret.append(renamed)
        return ret

    def fetch(self, node, source):
        tag = namespaces.local_name(node.tag)
        location = node.get('schemaLocation')
        if not location:
            if self.strict:
                raise FetchError('{} of {!r} in {} has no schemaLocation'.format(
                    tag, node.get('namespace', ''), source))
            log.warning('Skipping %s of %r in %s: no schemaLocation', tag, node.get('namespace', ''), source)
            return None, None
        location = self.source.resolve(location, source)
        return self.source.fetch(location), location

    def parse_element(self, node, default_namespace, source):
        max_occurs = node.get('maxOccurs', '1')
        elem = Element(source=source,
                       namespace=default_namespace,
                       name=node.get('name', ''),
                       min_occurs=parse_occurs(node.get('minOccurs', '1')),
                       max_occurs=parse_occurs(max_occurs),
                       unbounded=max_occurs == 'unbounded')

        ref = node.get('ref')
        if ref:
            elem.ref_namespace, elem.ref = namespaces.split_qname(
                expand_reference(ref, node, default_namespace))
            return elem, []

        type_ = node.get('type')
        if type_:
            # existing type
            elem.type = expand_reference(type_, node, default_namespace)
            return elem, []

        types = []
        for tag, child in children(node):
            if tag in ('simpleType', 'complexType'):
                tps = self.parse_type_element(child, default_namespace, source, hint=elem.name)
                elem.type = tps[0].qname
                types.extend(tps)
        if not elem.type:
            elem.type = ANY_TYPE
        return elem, types

    def parse_type_element(self, node, default_namespace, source, hint=''):
        """Parse a simpleType/complexType node.

        Returns the type itself first, followed by any anonymous types
        declared inside it.
        """
        name = node.get('name')
        common = dict(source=source, namespace=default_namespace)
        if name:
            common['name'] = name
        else:
            common['name'] = self.context.next_internal_name()
            common['hint'] = hint

        if namespaces.local_name(node.tag) == 'simpleType':
            for tag, child in children(node):
                if tag == 'restriction':
                    return self.parse_restriction(child, RestrictedType(**common), default_namespace, source)
            # list and union have no shape we model
            return [ElementType(**common)]

        tp = ComplexType(**common)
        return [tp] + self.parse_content(node, tp, default_namespace, source)

    def parse_restriction(self, node, tp, default_namespace, source):
        nested = []
        if node.get('base'):
            tp.base = expand_reference(node.get('base'), node, default_namespace)
        for tag, child in children(node):
            if tag == 'enumeration':
                tp.enumeration.append(child.get('value', ''))
            elif tag == 'pattern':
                tp.pattern = child.get('value', '')
            elif tag == 'simpleType':
                tps = self.parse_type_element(child, default_namespace, source, hint=tp.hint or tp.name)
                tp.base = tps[0].qname
                nested.extend(tps)
        return [tp] + nested

    def parse_content(self, node, tp, default_namespace, source):
        types = []
        for tag, child in children(node):
            if tag in ('sequence', 'all'):
                types.extend(self.parse_particles(child, tp.sub_elements, tp, default_namespace, source))
            elif tag == 'choice':
                types.extend(self.parse_particles(child, tp.choice_elements, tp, default_namespace, source))
            elif tag == 'attribute':
                types.extend(self.parse_attribute(child, tp, default_namespace, source))
            elif tag in ('complexContent', 'simpleContent'):
                for derivation_tag, derivation in children(child):
                    if derivation_tag not in ('extension', 'restriction'):
                        continue
                    # a restriction restates its content, only extension inherits
                    if derivation_tag == 'extension' and derivation.get('base'):
                        tp.base = expand_reference(derivation.get('base'), derivation, default_namespace)
                    types.extend(self.parse_content(derivation, tp, default_namespace, source))
        return types

    def parse_particles(self, node, target, tp, default_namespace, source):
        types = []
        for tag, child in children(node):
            if tag == 'element':
                elem, tps = self.parse_element(child, default_namespace, source)
                target.append(elem)
                types.extend(tps)
            elif tag == 'choice':
                types.extend(self.parse_particles(child, tp.choice_elements, tp, default_namespace, source))
            elif tag in ('sequence', 'all'):
                types.extend(self.parse_particles(child, target, tp, default_namespace, source))
        return types

    def parse_attribute(self, node, tp, default_namespace, source):
        use = node.get('use', 'optional')
        if use == 'prohibited':
            return []
        ref = node.get('ref')
        if ref:
            namespace, name = namespaces.split_qname(expand_reference(ref, node, default_namespace))
            tp.attributes[name] = Attribute(name=name, namespace=namespace, type=STRING, use=use)
            return []

        attr = Attribute(name=node.get('name', ''), namespace=default_namespace, use=use)
        types = []
        if node.get('type'):
            attr.type = expand_reference(node.get('type'), node, default_namespace)
        else:
            for tag, child in children(node):
                if tag == 'simpleType':
                    tps = self.parse_type_element(child, default_namespace, source, hint=attr.name)
                    attr.type = tps[0].qname
                    types.extend(tps)
        if not attr.type:
            attr.type = STRING
        tp.attributes[attr.name] = attr
        return types
