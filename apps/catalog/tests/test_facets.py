from decimal import Decimal

from django.http import QueryDict
from django.test import SimpleTestCase

from apps.catalog.services.facets import (
    FilterSpec,
    collections_in_scope,
    facet_counts,
    query,
    related_products,
    sort_products,
)
from .helpers import created, make_category, make_product

CATEGORIES = [
    make_category('Gifts', 'gifts', ['Wedding Gifts', 'Corporate Gifts']),
    make_category('Home Decor', 'home-decor', ['Clocks', 'Geode Wall Art']),
    make_category('Islamic Art', 'islamic-art', ['Dua Frames', 'Clocks']),
]


def sample_products():
    return [
        make_product('Keepsake', price='1000', created_at=created(1)),
        make_product('Coaster Set', collection='Corporate Gifts', price='2000', created_at=created(2)),
        make_product('Name Plaque', price='2500', created_at=created(3)),
        make_product('Desk Plaque', collection='Corporate Gifts', price='5000', created_at=created(4)),
        make_product('Wedding Frame', price='7000', created_at=created(5)),
        make_product('Resin Clock', 'home-decor', 'Clocks', '1500', created_at=created(6)),
        make_product('Geode Panel', 'home-decor', 'Geode Wall Art', '9500', created_at=created(7)),
        make_product('Ocean Clock', 'home-decor', 'Clocks', '5200', created_at=created(8)),
        make_product('Dua Frame', 'islamic-art', 'Dua Frames', '2800', created_at=created(9)),
        make_product('Ayat Frame', 'islamic-art', 'Dua Frames', '12000', created_at=created(10)),
    ]


class QueryTests(SimpleTestCase):
    def test_total_count_covers_all_matches_not_just_the_page(self):
        spec = FilterSpec(category_slugs=frozenset({'gifts'}), price_max=Decimal('3000'), page=2, page_size=5)
        page = query(sample_products(), CATEGORIES, spec)

        self.assertEqual(page.total_count, 3)
        self.assertEqual(page.items, ())
        self.assertEqual(page.total_pages, 1)
        self.assertFalse(page.has_next)
        self.assertTrue(page.has_prev)

    def test_first_page_returns_matches(self):
        spec = FilterSpec(category_slugs=frozenset({'gifts'}), price_max=Decimal('3000'), page_size=5)
        page = query(sample_products(), CATEGORIES, spec)
        self.assertEqual([p.name for p in page.items], ['Name Plaque', 'Coaster Set', 'Keepsake'])

    def test_default_spec_is_newest_first(self):
        page = query(sample_products(), CATEGORIES)
        self.assertEqual(page.total_count, 10)
        self.assertEqual(page.items[0].name, 'Ayat Frame')
        self.assertEqual(page.page_size, 12)

    def test_collection_filter_spans_categories(self):
        spec = FilterSpec(collection_names=frozenset({'Clocks'}))
        page = query(sample_products(), CATEGORIES, spec)
        self.assertEqual({p.name for p in page.items}, {'Resin Clock', 'Ocean Clock'})

    def test_search_is_case_insensitive_over_name_and_description(self):
        products = sample_products() + [
            make_product('Tray', description='Hand-poured OCEAN resin', created_at=created(0)),
        ]
        page = query(products, CATEGORIES, FilterSpec(search_text='ocean'))
        self.assertEqual([p.name for p in page.items], ['Ocean Clock', 'Tray'])

    def test_inverted_price_range_matches_nothing(self):
        spec = FilterSpec(price_min=Decimal('5000'), price_max=Decimal('1000'))
        self.assertTrue(spec.has_empty_price_range)
        self.assertEqual(query(sample_products(), CATEGORIES, spec).total_count, 0)

    def test_pagination_shape(self):
        page = query(sample_products(), CATEGORIES, FilterSpec(page=2, page_size=4))
        self.assertEqual(page.pagination(), {
            'totalItems': 10,
            'totalPages': 3,
            'currentPage': 2,
            'hasNext': True,
            'hasPrev': True,
            'nextPage': 3,
            'prevPage': 1,
        })

    def test_page_past_the_end_points_back_to_the_last_page(self):
        page = query(sample_products(), CATEGORIES, FilterSpec(page=9, page_size=4))
        pagination = page.pagination()
        self.assertEqual(page.items, ())
        self.assertEqual(pagination['totalPages'], 3)
        self.assertEqual(pagination['prevPage'], 3)
        self.assertIsNone(pagination['nextPage'])

    def test_no_matches_has_no_previous_page(self):
        spec = FilterSpec(search_text='nothing like this', page=2)
        self.assertIsNone(query(sample_products(), CATEGORIES, spec).pagination()['prevPage'])

    def test_page_size_and_page_are_clamped_once(self):
        page = query(sample_products(), CATEGORIES, FilterSpec(page=0, page_size=0))
        self.assertEqual(page.page, 1)
        self.assertEqual(page.page_size, 1)
        self.assertEqual(page.total_pages, 10)
        self.assertEqual(len(page.items), 1)


class SortTests(SimpleTestCase):
    def test_price_low_keeps_input_order_for_ties(self):
        products = [
            make_product('A', price='3000'),
            make_product('B', price='1000'),
            make_product('C', price='1000'),
            make_product('D', price='1000'),
        ]
        self.assertEqual([p.name for p in sort_products(products, 'price-low')], ['B', 'C', 'D', 'A'])

    def test_price_high_keeps_input_order_for_ties(self):
        products = [
            make_product('A', price='1000'),
            make_product('B', price='3000'),
            make_product('C', price='3000'),
        ]
        self.assertEqual([p.name for p in sort_products(products, 'price-high')], ['B', 'C', 'A'])

    def test_rating_and_name(self):
        products = [
            make_product('beta', rating=Decimal('4.5')),
            make_product('Alpha', rating=Decimal('3')),
            make_product('gamma', rating=Decimal('5')),
        ]
        self.assertEqual([p.name for p in sort_products(products, 'rating')], ['gamma', 'beta', 'Alpha'])
        self.assertEqual([p.name for p in sort_products(products, 'name')], ['Alpha', 'beta', 'gamma'])

    def test_newest_puts_undated_products_last(self):
        products = [
            make_product('Old', created_at=created(1)),
            make_product('Undated'),
            make_product('New', created_at=created(5)),
        ]
        self.assertEqual([p.name for p in sort_products(products, 'newest')], ['New', 'Old', 'Undated'])

    def test_input_is_not_modified(self):
        products = [make_product('A', price='3'), make_product('B', price='1')]
        sort_products(products, 'price-low')
        self.assertEqual([p.name for p in products], ['A', 'B'])


class FacetCountTests(SimpleTestCase):
    def test_each_facet_is_counted_with_itself_relaxed(self):
        spec = FilterSpec(category_slugs=frozenset({'gifts'}), price_max=Decimal('3000'))
        counts = facet_counts(sample_products(), CATEGORIES, spec)

        # categories: price filter applies, category filter does not
        self.assertEqual(counts.categories, {'gifts': 3, 'home-decor': 1, 'islamic-art': 1})
        # collections: only those of the selected category
        self.assertEqual(counts.collections, {'Wedding Gifts': 2, 'Corporate Gifts': 1})
        # price bands: category applies, price does not
        self.assertEqual(counts.price_bands, {
            '0-3000': 3,
            '3000-6000': 1,
            '6000-10000': 1,
            '10000': 0,
        })

    def test_to_dict_keys(self):
        counts = facet_counts([], CATEGORIES, FilterSpec())
        self.assertEqual(set(counts.to_dict()), {'categories', 'collections', 'priceBands'})

    def test_collections_in_scope_are_deduplicated_in_category_order(self):
        self.assertEqual(
            collections_in_scope(CATEGORIES),
            ['Wedding Gifts', 'Corporate Gifts', 'Clocks', 'Geode Wall Art', 'Dua Frames'],
        )
        self.assertEqual(
            collections_in_scope(CATEGORIES, frozenset({'islamic-art'})),
            ['Dua Frames', 'Clocks'],
        )


class FilterSpecParamsTests(SimpleTestCase):
    def test_parses_query_dict(self):
        params = QueryDict(
            'category=gifts,home-decor&collection=Clocks&collection=Wedding+Gifts'
            '&priceRange=3000-6000&search=frame&sort=price-high&page=2&limit=500'
        )
        spec = FilterSpec.from_params(params)

        self.assertEqual(spec.category_slugs, frozenset({'gifts', 'home-decor'}))
        self.assertEqual(spec.collection_names, frozenset({'Clocks', 'Wedding Gifts'}))
        self.assertEqual((spec.price_min, spec.price_max), (Decimal('3000'), Decimal('6000')))
        self.assertEqual(spec.search_text, 'frame')
        self.assertEqual(spec.sort_key, 'price-high')
        self.assertEqual(spec.page, 2)
        self.assertEqual(spec.page_size, 100)

    def test_bad_values_fall_back_to_defaults(self):
        spec = FilterSpec.from_params({'page': '0', 'limit': 'x', 'sort': 'bogus', 'minPrice': 'abc'})
        self.assertEqual(spec.page, 1)
        self.assertEqual(spec.page_size, 12)
        self.assertEqual(spec.sort_key, 'newest')
        self.assertIsNone(spec.price_min)

    def test_explicit_bounds_override_band(self):
        spec = FilterSpec.from_params({'priceRange': '10000', 'maxPrice': '20000'})
        self.assertEqual((spec.price_min, spec.price_max), (Decimal('10000'), Decimal('20000')))

    def test_legacy_price_sort(self):
        self.assertEqual(FilterSpec.from_params({'sort': 'price', 'order': 'desc'}).sort_key, 'price-high')
        self.assertEqual(FilterSpec.from_params({'sort': 'price'}).sort_key, 'price-low')

    def test_flags(self):
        spec = FilterSpec.from_params({'inStock': 'true', 'featured': '0'})
        self.assertTrue(spec.in_stock)
        self.assertFalse(spec.featured)


class RelatedProductsTests(SimpleTestCase):
    def test_same_category_and_collection_excluding_itself(self):
        products = sample_products()
        products.append(make_product('Hidden', price='900', is_active=False))
        product = products[0]

        related = related_products(products, product)
        self.assertEqual([p.name for p in related], ['Name Plaque', 'Wedding Frame'])

    def test_limit(self):
        products = [make_product(f'P{i}', id=i) for i in range(1, 8)]
        self.assertEqual(len(related_products(products, products[0], limit=4)), 4)
