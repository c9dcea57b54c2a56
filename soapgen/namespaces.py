import re

XS = 'http://www.w3.org/2001/XMLSchema'

NAMESPACES = {'wsdl': 'http://schemas.xmlsoap.org/wsdl/',
              'soap': 'http://schemas.xmlsoap.org/wsdl/soap/',
              'soap12': 'http://schemas.xmlsoap.org/wsdl/soap12/',
              'http': 'http://schemas.xmlsoap.org/wsdl/http/',
              'mime': 'http://schemas.xmlsoap.org/wsdl/mime/',
              'soapenc': 'http://schemas.xmlsoap.org/soap/encoding/',
              'soapenv': 'http://schemas.xmlsoap.org/soap/envelope/',
              'xsi': 'http://www.w3.org/2001/XMLSchema-instance',
              'xs': XS,
              }

# older drafts still show up in the wild
SCHEMA_NAMESPACES = (XS,
                     'http://www.w3.org/2000/10/XMLSchema',
                     'http://www.w3.org/1999/XMLSchema')


def prefix_map(node):
    """Prefix -> namespace URI for everything declared in scope on `node`.

    The default (unprefixed) namespace is stored under ''.
    """
    return {prefix or '': uri for prefix, uri in node.nsmap.items()}


def split(token):
    prefix, sep, local = token.partition(':')
    if not sep:
        return '', token
    return prefix, local


def expand(token, prefixes, default_namespace=''):
    """Turn `prefix:local` into `namespace:local`.

    Without a prefix the namespace is `default_namespace`; an undeclared
    prefix expands to the empty namespace.
    """
    if ':' not in token:
        return qualify(default_namespace, token)
    prefix, local = split(token)
    return qualify(prefixes.get(prefix, ''), local)


def qualify(namespace, local):
    return '{}:{}'.format(namespace or '', local)


def split_qname(qname):
    # namespace URIs contain colons, local names never do
    namespace, _, local = qname.rpartition(':')
    return namespace, local


def local_name(tag):
    return re.sub(r'^\{.*?\}', '', tag, 1)


def is_schema_namespace(namespace):
    return namespace in SCHEMA_NAMESPACES


def strip_schema_namespace(qname):
    namespace, local = split_qname(qname)
    if is_schema_namespace(namespace):
        return ':' + local
    return qname
