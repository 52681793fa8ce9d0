"""Pytest configuration and HTML fixtures."""

import pytest

from kattlog.interactive.dom import PageView

SHOP_URL = "https://shop.test/sofas"

LISTING_HTML = """
<html><body>
<header><nav class="menu">
  <a href="/sofas">Sofás</a>
  <a href="/mesas">Mesas</a>
</nav></header>
<main>
  <ul class="grid">
    <li class="product-card">
      <a href="/p/sofa-oslo" title="Sofá Oslo 3 plazas"><img src="https://cdn.shop.test/img/sofa-oslo.jpg" alt="Sofá Oslo 3 plazas"></a>
      <h3 class="product-title">Sofá Oslo 3 plazas</h3>
      <span class="price">499,99 €</span>
    </li>
    <li class="product-card">
      <a href="/p/mesa-nord"><img src="https://cdn.shop.test/img/mesa-nord.jpg" alt="Mesa Nord 120x80 cm"></a>
      <h3 class="product-title">Mesa Nord 120x80 cm</h3>
      <span class="price">189,00 €</span>
    </li>
    <li class="product-card">
      <a href="/p/silla-alba"><img src="https://cdn.shop.test/img/silla-alba.jpg" alt="Silla Alba tapizada"></a>
      <h3 class="product-title">Silla Alba tapizada</h3>
      <span class="price"><del>89,00 €</del>
      <ins>69,00 €</ins></span>
    </li>
    <li class="product-card">
      <a href="/p/lampara-arco"><img src="https://cdn.shop.test/img/lampara-arco.jpg" alt="Lámpara Arco de pie"></a>
      <h3 class="product-title">Lámpara Arco de pie</h3>
      <span class="price">129,00 €</span>
    </li>
  </ul>
</main>
</body></html>
"""

TOKEN_LISTING_HTML = """
<html><body>
<div class="tile-wall">
""" + "".join(
    f"""
  <div class="shop-tile">
    <a href="/products/vase-{color.lower()}"><img src="https://cdn.shop.test/img/vase-{color.lower()}.jpg" alt="Ceramic Vase {color}"></a>
    <p class="tile-caption">Handmade ceramic vase with matte glaze finish.</p>
    <strong>€ 24.90</strong>
  </div>"""
    for color in ("Azul", "Verde", "Rojo", "Blanco")
) + """
</div>
</body></html>
"""

NAVIGATION_HTML = """
<html><body>
<header><nav class="menu">
  <a href="/">Inicio</a>
  <a href="/sofas"><svg></svg>Sofás</a>
  <a href="/mesas-de-centro">Mesas de centro</a>
  <a href="/sillas">Sillas</a>
  <a href="https://other.test/lamparas">Lámparas</a>
  <a href="/catalogo.pdf">Catálogo</a>
  <a href="/es/sofas" title="Sofás">Ver</a>
  <a href="/black-friday">Black Friday 2026</a>
  <a href="/fr">France</a>
</nav></header>
<main><p>Bienvenido</p></main>
</body></html>
"""

FOOTER_FALLBACK_HTML = """
<html><body>
<nav><a href="/sofas">Sofás</a><a href="/login">Login</a></nav>
<main><p>Contenido</p></main>
<footer>
  <a href="/camas">Camas</a>
  <a href="/armarios">Armarios</a>
  <a href="/privacidad">Política de privacidad</a>
</footer>
</body></html>
"""

CONTENT_CATEGORIES_HTML = """
<html><body>
<header><a href="/outlet"><img src="https://cdn.shop.test/img/outlet.jpg">Outlet</a></header>
<main>
  <div class="cat-grid">
    <a class="cat" href="/sofas"><img src="https://cdn.shop.test/c/sofas.jpg" alt="Sofás"><h3>Sofás</h3></a>
    <a class="cat" href="/mesas"><img src="https://cdn.shop.test/c/mesas.jpg" alt="Mesas"><h3>Mesas</h3></a>
    <a class="cat" href="/mesas"><img src="https://cdn.shop.test/c/mesas-2.jpg" alt="Mesas"><h3>Mesas</h3></a>
    <div class="product">
      <a href="/p/sofa-oslo"><img src="https://cdn.shop.test/p/oslo.jpg"></a>
      <h3>Sofá Oslo</h3>
      <span class="price">499 €</span>
    </div>
  </div>
</main>
</body></html>
"""

NAV_CONTAINERS_HTML = """
<html><body>
<header>
  <a href="/">Logo</a><a href="/login">Login</a><a href="/cart">Cart</a>
</header>
<nav class="main-nav">
  <span>Productos</span>
  <ul>
    <li><a href="/sofas">Sofás</a></li>
    <li><a href="/mesas">Mesas</a></li>
    <li><a href="/sillas">Sillas</a></li>
  </ul>
</nav>
<footer><section>
  <a href="/camas">Camas</a><a href="/armarios">Armarios</a><a href="/espejos">Espejos</a>
</section></footer>
</body></html>
"""

DETAIL_HTML = """
<html><head>
<meta property="og:title" content="Sofá Oslo">
<meta property="og:type" content="product">
<meta property="og:image" content="/img/sofa-oslo-main.jpg">
<meta name="description" content="Sofá Oslo de tres plazas tapizado en tela con patas de roble macizo.">
<script type="application/ld+json">
{"@type": "Product", "name": "Sofá Oslo", "image": ["https://cdn.shop.test/p/oslo-1.jpg", "https://cdn.shop.test/p/oslo-2.jpg"]}
</script>
</head><body>
<main>
  <h1>Sofá Oslo</h1>
  <span class="price">899,00 €</span>
  <div class="c-product-gallery__list">
    <img src="https://cdn.shop.test/p/oslo-2.jpg">
    <img src="https://cdn.shop.test/p/oslo-3.jpg">
  </div>
  <img src="/img/payment-visa.png">
  <div class="related-products"><img src="https://cdn.shop.test/p/other.jpg"></div>
  <p>Alto: 85 cm Ancho: 210 cm Fondo: 95 cm</p>
  <p>Material: Roble macizo. Colores: Gris claro. Peso: 40 kg</p>
  <button>Añadir al carrito</button>
</main>
</body></html>
"""

INTERACTIVE_HTML = """
<html><body>
<header data-kattlog-rect="0,0,1280,80">
  <div class="product-card" id="header-card" data-kattlog-rect="0,0,300,80">
    <h3>Promo</h3><span>19,99 €</span>
    <img id="header-img" src="https://cdn.shop.test/promo.jpg" width="300" height="300">
  </div>
</header>
<main data-kattlog-rect="0,80,1280,2000">
  <ul class="grid" data-kattlog-rect="0,80,1280,900">
    <li class="product-card" id="card" data-kattlog-rect="0,100,300,420">
      <a href="/p/sofa-oslo" data-kattlog-rect="0,100,300,300"><img id="card-img" src="https://cdn.shop.test/p/oslo.jpg" alt="Sofá Oslo" data-kattlog-rect="0,100,300,300"></a>
      <h3 class="product-title">Sofá Oslo</h3>
      <span class="price">499,99 €</span>
      <button class="btn">Añadir</button>
    </li>
    <li class="tile" id="image-only" data-kattlog-rect="320,100,300,300">
      <img id="lonely-img" src="https://cdn.shop.test/p/deco.jpg" data-kattlog-rect="320,100,300,300">
    </li>
  </ul>
</main>
</body></html>
"""


@pytest.fixture
def listing_html():
    return LISTING_HTML


@pytest.fixture
def token_listing_html():
    return TOKEN_LISTING_HTML


@pytest.fixture
def navigation_html():
    return NAVIGATION_HTML


@pytest.fixture
def detail_html():
    return DETAIL_HTML


@pytest.fixture
def interactive_view():
    return PageView.from_html(INTERACTIVE_HTML, SHOP_URL, scroll=(0, 200))


@pytest.fixture
def footer_fallback_html():
    return FOOTER_FALLBACK_HTML


@pytest.fixture
def content_categories_html():
    return CONTENT_CATEGORIES_HTML


@pytest.fixture
def nav_containers_html():
    return NAV_CONTAINERS_HTML


@pytest.fixture
def interactive_html():
    return INTERACTIVE_HTML
