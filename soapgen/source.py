import lxml.etree, requests, logging, os, re, urllib.parse

log = logging.getLogger(__name__)


class DocumentSource(object):
    """Fetches WSDL and XSD documents and hands back their root element.

    Remote documents are cached on disk and a cached copy always wins over
    downloading again. Local paths are read directly and never cached.
    """
    cache_directory = os.path.join('/', 'tmp', 'wsdls')
    timeout = 30

    def __init__(self, cache_directory=None, timeout=None):
        if cache_directory is not None:
            self.cache_directory = cache_directory
        if timeout is not None:
            self.timeout = timeout

    @staticmethod
    def is_remote(identifier):
        return urllib.parse.urlsplit(identifier).scheme in ('http', 'https')

    @staticmethod
    def resolve(location, base=None):
        if not base or DocumentSource.is_remote(location) or os.path.isabs(location):
            return location
        if DocumentSource.is_remote(base):
            return urllib.parse.urljoin(base, location)
        # inline schemas are identified as `path#n`
        base = base.split('#', 1)[0]
        return os.path.join(os.path.dirname(base), location)

    def fetch(self, identifier):
        if self.is_remote(identifier):
            raw_xml = self._fetch_remote(identifier)
        else:
            log.debug('Opening %s', identifier)
            with open(identifier, 'rb') as f:
                raw_xml = f.read()
        return lxml.etree.fromstring(raw_xml, base_url=identifier)

    def _fetch_remote(self, url):
        filename = self.get_cache_filename(url)
        try:
            with open(filename, 'rb') as f:
                log.debug('Using cache %s for %s', filename, url)
                return f.read()
        except FileNotFoundError:
            pass
        log.info('Downloading %s', url)
        req = requests.get(url, timeout=self.timeout)
        req.raise_for_status()
        raw_xml = req.content
        os.makedirs(self.cache_directory, exist_ok=True)
        with open(filename, 'wb') as f:
            f.write(raw_xml)
        return raw_xml

    def get_cache_filename(self, url):
        name = re.sub(r'[^A-Za-z0-9._-]+', '_', url)
        parts = urllib.parse.urlsplit(url)
        if parts.query or not os.path.splitext(parts.path)[1]:
            name += '.wsdl'
        return os.path.join(self.cache_directory, name)
