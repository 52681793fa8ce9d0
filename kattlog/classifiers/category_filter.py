"""Category-name validity filter.

Navigation menus mix real categories with dozens of utility, legal,
promotional and country links. This filter is what keeps the navigation
passes precise.
"""

import re

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
MAX_NAME_WORDS = 4

EXCLUDED_NAMES = frozenset([
    # Navigation chrome
    'home', 'inicio', 'about', 'nosotros', 'contact', 'contacto',
    'login', 'cart', 'carrito', 'account', 'cuenta', 'search', 'buscar',
    'terms', 'privacy', 'ayuda', 'help', 'back', 'volver', 'menu',
    'shop now', 'comprar ahora', 'ver más', 'view more', 'see all',
    'ver todo', 'ver todos', 'view all', 'show more', 'read more',
    'view collection', 'ver colección', 'shop collection',
    'todo', 'todos', 'collection', 'colección',
    'newsletter', 'subscribe', 'sign up', 'log in', 'log out',
    'anterior', 'siguiente', 'prev', 'next', 'close', 'cerrar',
    'view', 'ver', 'shop', 'more', 'all', 'filter', 'filtrar',
    'sort', 'ordenar', 'clear', 'limpiar', 'apply', 'aplicar',
    'sklum', 'sklum pro', 'blog', 'magazine', 'trends', 'tendencias',
    'nuestras tiendas', 'our stores', 'here to stay', 'selected',
    # Countries and languages
    'france', 'francia', 'italy', 'italia', 'portugal', 'spain', 'españa',
    'germany', 'deutschland', 'united kingdom', 'uk', 'ireland', 'irlanda',
    'nederland', 'netherlands', 'belgium', 'belgique', 'polsky', 'poland',
    'polska', 'austria', 'schweiz', 'suisse', 'switzerland',
    'english', 'español', 'français', 'deutsch', 'italiano', 'português',
    # Promotions
    'black friday', 'cyber monday', 'rebajas', 'sale', 'outlet', 'descuento',
    'descuentos', 'códigos', 'código', 'cupones', 'cupón', 'friends plan',
    'sklum friends plan', 'códigos de descuento', 'rebajas muebles',
    'muebles de madera', 'búsquedas', 'búsquedas interesantes',
    'interesting searches',
    # Marketing and slogans
    'descubrir', 'discover', 'aprovecho', 'best sellers', 'novedades',
    'new arrivals', 'destacados', 'featured', 'marcas colaboradoras',
    'advertencia', 'nuestros best sellers', 'esta semana', 'no te pierdas',
    'shop all', 'nuestras marcas', 'our brands', 'colecciones', 'collections',
    # Listing controls
    'ver cuadrícula', 'ver lista', 'grid view', 'list view', 'relevancia',
    'precio: menor a mayor', 'precio: mayor a menor', 'novedades primero',
])

YEAR_PATTERN = re.compile(r'\b202\d\b')
SEASON_PATTERN = re.compile(r'\b(?:aw|ss)\d\d', re.IGNORECASE)
YEAR_RANGE_PATTERN = re.compile(r'\b\d\d-\d\d\b')
PURE_PROMOTION_PATTERN = re.compile(
    r'^(?:black friday|cyber monday|rebajas|sale|outlet|descuentos?|códigos?'
    r'|cupones|cupón|promociones|ofertas)$',
    re.IGNORECASE
)
UTILITY_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r'nuestras tiendas', r'our stores', r'here to stay', r'selected',
    r'newsletter', r'subscribe', r'sign up', r'log in', r'log out',
    r'privacy policy', r'terms of service', r'cookies', r'help center',
    r'contact us', r'about us', r'shipping info', r'returns',
    r'descubre', r'nuestros', r'nuestras', r'best sellers', r'semana',
    r'pierdas', r'advertencia', r'marcas', r'colaboradoras', r'best-sellers',
)]
BANNER_PATTERN = re.compile(r'^(?:descubre|discover|shop|comprar|ver|view)\s+', re.IGNORECASE)
CURRENCY_PATTERN = re.compile(r'[€$£%]')
SPECIAL_PRICE_PATTERN = re.compile(r'special\s*price', re.IGNORECASE)
DISCOUNT_PATTERN = re.compile(r'\d+\s*(?:off|%)', re.IGNORECASE)
LEADING_NUMBER_PATTERN = re.compile(r'^\d+\s+\w')
CAMEL_CASE_PATTERN = re.compile(r'[a-záéíóúñ][A-ZÁÉÍÓÚÑ]{2,}')

LEGAL_KEYWORDS = (
    'cookies', 'política', 'privacidad', 'términos', 'condiciones', 'aviso',
    'legal', 'envío', 'devoluciones', 'pago', 'seguro', 'entendido', 'aceptar',
    'configurar', 'ordenar', 'filtrar', 'relevancia', 'precio', 'novedades',
    'populares',
)

# Materials, connectors and units that mark a specific product name
SPECIFIC_PRODUCT_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r'\bmadera\b', r'\btapizada\b', r'\bterciopelo\b', r'\bacero\b',
    r'\bcon\s+\S', r'\bpara\s+\S', r'\bde\s+\S',
    r'\bcm\b', r'\bkg\b', r'\bpack\b', r'\bset\b',
)]

GENERIC_MULTIWORD_CATEGORIES = frozenset([
    'mesas de centro', 'sillas de comedor', 'mesas de comedor',
    'muebles de tv', 'muebles de jardín',
])

CLEAN_PREFIX_PATTERN = re.compile(
    r'^(?:ver|view|shop|descubrir|discover|rebajas|sale|outlet|promociones)\s+',
    re.IGNORECASE
)
CLEAN_SUFFIX_PATTERN = re.compile(
    r'\s+(?:now|ahora|más|more|descubrir|discover|rebajas|sale|outlet|promociones)$',
    re.IGNORECASE
)


def is_valid_category_name(text: str) -> bool:
    """
    Decide whether a link text can be a product category.

    Args:
        text: Cleaned link or card text

    Returns:
        True for generic category names such as "Sofás" or "Mesas de centro"
    """
    if not text:
        return False
    text = text.strip()
    if len(text) < MIN_NAME_LENGTH or len(text) > MAX_NAME_LENGTH:
        return False

    lower = text.lower()
    words = text.split()

    if lower in EXCLUDED_NAMES:
        return False

    if YEAR_PATTERN.search(text):
        return False
    if SEASON_PATTERN.search(lower) or YEAR_RANGE_PATTERN.search(lower):
        return False
    if PURE_PROMOTION_PATTERN.match(lower):
        return False
    if any(p.search(lower) for p in UTILITY_PATTERNS):
        return False
    if BANNER_PATTERN.match(lower) and len(words) > 2:
        return False

    if CURRENCY_PATTERN.search(text):
        return False
    if SPECIAL_PRICE_PATTERN.search(text):
        return False
    if DISCOUNT_PATTERN.search(text):
        return False
    if LEADING_NUMBER_PATTERN.match(text):
        return False
    if CAMEL_CASE_PATTERN.search(text):
        return False

    if len(words) > MAX_NAME_WORDS:
        return False
    if 'cookie' in lower or 'accept' in lower:
        return False
    if any(keyword in lower for keyword in LEGAL_KEYWORDS):
        return False

    if len(words) >= 3 and any(p.search(lower) for p in SPECIFIC_PRODUCT_PATTERNS):
        if lower not in GENERIC_MULTIWORD_CATEGORIES:
            return False

    return True


def clean_category_name(text: str) -> str:
    """Collapse whitespace and strip call-to-action prefixes and suffixes."""
    if not text:
        return ''
    cleaned = re.sub(r'\s+', ' ', text)
    cleaned = CLEAN_PREFIX_PATTERN.sub('', cleaned)
    cleaned = CLEAN_SUFFIX_PATTERN.sub('', cleaned)
    return cleaned.strip()
