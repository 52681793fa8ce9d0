"""Command line entry point."""

import argparse
import json
import logging
import sys
from typing import Optional, Tuple

from .core.config import EngineConfig
from .core.engine import CatalogEngine
from .interactive.capture import CaptureResolver
from .interactive.dom import PageView
from .interactive.scorer import ProductScorer


def status(message: str):
    """User-facing progress line; stdout is reserved for JSON."""
    print(message, file=sys.stderr)


def load_html(args, engine: CatalogEngine) -> Tuple[Optional[str], str]:
    """HTML from ``--html`` or fetched from the URL argument."""
    if args.html:
        with open(args.html, encoding='utf-8') as f:
            return f.read(), args.base_url or args.url or ''

    if not args.url:
        status("✗ Provide a URL or --html FILE")
        return None, ''

    status(f"Fetching {args.url}...")
    result = engine.fetcher.fetch(args.url)
    if not result.success or not result.html:
        status(f"✗ Failed to fetch page: {result.error}")
        return None, args.url
    status(f"✓ Fetched via {result.method} ({len(result.html)} chars)")
    return result.html, args.url


def write_output(data, output: Optional[str]):
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(text)
        status(f"✓ Saved to {output}")
    else:
        print(text)


def run_products(args, engine: CatalogEngine) -> int:
    html, url = load_html(args, engine)
    if html is None:
        return 1

    keywords = None
    if args.keywords:
        keywords = [k.strip() for k in args.keywords.split(',') if k.strip()]
    elif args.category:
        keywords = engine.category_keywords(args.category)

    report = engine.listing_extractor.extract_with_report(html, url)
    candidates = report.candidates
    if keywords:
        candidates = engine.filter_by_keywords(candidates, keywords)
    if args.dimensions:
        engine.enrich_dimensions(candidates)

    status(f"✓ {len(candidates)} products ({report.method})")
    write_output([c.to_dict() for c in candidates], args.output)
    return 0


def run_categories(args, engine: CatalogEngine) -> int:
    html, url = load_html(args, engine)
    if html is None:
        return 1

    detection = engine.detect_categories(html, url)
    status(f"✓ View: {detection.view} ({len(detection.categories)} categories, "
           f"{len(detection.products)} products, source: {detection.source})")
    write_output(detection.to_dict(), args.output)
    return 0 if detection.success else 1


def run_nav_html(args, engine: CatalogEngine) -> int:
    html, _ = load_html(args, engine)
    if html is None:
        return 1

    nav_html = engine.category_extractor.extract_nav_html(html)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(nav_html)
        status(f"✓ Saved to {args.output}")
    else:
        print(nav_html)
    return 0


def run_details(args, engine: CatalogEngine) -> int:
    html, url = load_html(args, engine)
    if html is None:
        return 1

    data = engine.parse_product(html, url).to_dict()
    data['details'] = engine.extract_details(html, url).to_dict()
    status(f"✓ {data['title'] or 'Untitled'}: {len(data['details']['images'])} images")
    write_output(data, args.output)
    return 0


def run_capture(args, engine: CatalogEngine) -> int:
    with open(args.html, encoding='utf-8') as f:
        view = PageView.from_html(
            f.read(),
            args.base_url,
            viewport={'width': args.viewport_width, 'height': 720}
        )

    target = view.select_one(args.selector)
    if target is None:
        status(f"✗ No element matches {args.selector}")
        return 1

    best = ProductScorer(view).find_best(target)
    if best is None:
        status("✗ Nothing around the target scores as a product")
        return 1

    capture = CaptureResolver(view, proxy_marker=engine.config.proxy_marker).resolve(best.element)
    status(f"✓ Captured <{capture.tag_name.lower()}> (score {best.score})")
    if args.as_product:
        products = engine.process_captures([capture])
        write_output([p.to_dict() for p in products], args.output)
    else:
        write_output(capture.to_dict(), args.output)
    return 0


def add_source_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('url', nargs='?', help='Page URL to fetch')
    parser.add_argument('--html', type=str, help='Read HTML from a file instead of fetching')
    parser.add_argument('--base-url', type=str, help='URL the HTML file was saved from')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='kattlog',
        description='Extract products and categories from e-commerce pages',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kattlog products https://shop.example/sofas
  kattlog products --html page.html --base-url https://shop.example/sofas
  kattlog --ai categories https://shop.example/
  kattlog --output sofa.json details https://shop.example/p/sofa-oslo
  kattlog capture --html rendered.html --base-url https://shop.example/ --selector ".card img"
        """
    )
    parser.add_argument('--output', type=str, help='Write JSON to this file instead of stdout')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--browser', action='store_true', help='Render pages with Playwright first')
    parser.add_argument('--ai', action='store_true', help='Use Gemini for category naming')

    subparsers = parser.add_subparsers(dest='command', required=True)

    products = subparsers.add_parser('products', help='Extract product cards from a listing page')
    add_source_arguments(products)
    products.add_argument('--keywords', type=str, help='Comma-separated keyword filter')
    products.add_argument('--category', type=str, help='Filter by category name (keywords via Gemini with --ai)')
    products.add_argument('--dimensions', action='store_true', help='Fetch product pages to fill in missing dimensions')
    products.set_defaults(handler=run_products)

    categories = subparsers.add_parser('categories', help='Detect categories or the products view')
    add_source_arguments(categories)
    categories.set_defaults(handler=run_categories)

    nav_html = subparsers.add_parser('nav-html', help='Print the selected navigation containers')
    add_source_arguments(nav_html)
    nav_html.set_defaults(handler=run_nav_html)

    details = subparsers.add_parser('details', help='Parse a product detail page')
    add_source_arguments(details)
    details.set_defaults(handler=run_details)

    capture = subparsers.add_parser('capture', help='Resolve a pointer selection on a rendered page')
    capture.add_argument('--html', type=str, required=True, help='Rendered HTML with data-kattlog-rect boxes')
    capture.add_argument('--base-url', type=str, required=True, help='URL of the rendered page')
    capture.add_argument('--selector', type=str, required=True, help='CSS selector of the clicked element')
    capture.add_argument('--viewport-width', type=int, default=1280)
    capture.add_argument('--as-product', action='store_true', help='Output the product record instead of the raw capture')
    capture.set_defaults(handler=run_capture)

    return parser


def main(argv=None) -> int:
    """Main function to run the extractor."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s %(message)s'
    )

    config = EngineConfig(use_ai_naming=args.ai, use_browser=args.browser)
    if not config.validate():
        status("⚠ No GEMINI_API_KEY found, continuing with rule-based naming")
        config.use_ai_naming = False

    engine = CatalogEngine(config)
    return args.handler(args, engine)


if __name__ == '__main__':
    sys.exit(main())
