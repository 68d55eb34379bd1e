from django.test import SimpleTestCase

from apps.catalog.services.identifiers import is_valid_slug, normalize, unique_identifier


class NormalizeTests(SimpleTestCase):
    def test_collapses_separators_and_trims(self):
        self.assertEqual(normalize("  A/B  "), "a-b")

    def test_lowercases_and_joins_words(self):
        self.assertEqual(normalize("Ayatul Kursi  Wall-Art!"), "ayatul-kursi-wall-art")

    def test_non_ascii_letters_become_separators(self):
        self.assertEqual(normalize("Café Décor"), "caf-d-cor")

    def test_empty_input_gives_empty_identifier(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize("   "), "")
        self.assertEqual(normalize(None), "")
        self.assertEqual(normalize("!!!"), "")

    def test_output_is_idempotent(self):
        for text in ["Small-6 inch", "  A/B  ", "Memory Frames (Wedding, Baby, Family)"]:
            once = normalize(text)
            self.assertEqual(normalize(once), once)
            self.assertRegex(once, r'^[a-z0-9]+(-[a-z0-9]+)*$')


class SlugValidationTests(SimpleTestCase):
    def test_valid_slugs(self):
        self.assertTrue(is_valid_slug("islamic-art"))
        self.assertTrue(is_valid_slug("gifts2"))

    def test_invalid_slugs(self):
        for slug in ["", "Islamic-Art", "-gifts", "gifts-", "home--decor", "home decor"]:
            with self.subTest(slug=slug):
                self.assertFalse(is_valid_slug(slug))


class UniqueIdentifierTests(SimpleTestCase):
    def test_free_base_is_kept(self):
        self.assertEqual(unique_identifier("clocks", []), "clocks")

    def test_appends_first_free_counter(self):
        self.assertEqual(unique_identifier("clocks", ["clocks"]), "clocks-2")
        self.assertEqual(unique_identifier("clocks", ["clocks", "clocks-2", "clocks-3"]), "clocks-4")
