import tempfile
import unittest
from pathlib import Path

from wordlanes.core.exceptions import DictionaryLoadError
from wordlanes.data.dictionary import DictionaryConfig, WordDictionary
from wordlanes.data.normalization import clean_word


class DictionaryTests(unittest.TestCase):
    def test_clean_word_folds_accents_and_drops_symbols(self) -> None:
        self.assertEqual(clean_word("Café"), "CAFE")
        self.assertEqual(clean_word("o'clock"), "OCLOCK")
        self.assertEqual(clean_word(""), "")

    def test_file_entries_are_cleaned_filtered_and_deduplicated(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sample = Path(tmpdir) / "words.txt"
            sample.write_text(
                "# birds\n"
                "crane\n"
                "\n"
                "Crane\n"
                "owl\n"
                "pelican\n"
                "ibis\n",
                encoding="utf-8",
            )

            dictionary = WordDictionary(DictionaryConfig(path=sample, min_length=4, max_length=6))
            self.assertEqual(list(dictionary), ["CRANE", "IBIS"])
            self.assertIn("crane", dictionary)
            self.assertNotIn("OWL", dictionary)
            self.assertEqual(dictionary.count_by_length(), {4: 1, 5: 1})

    def test_words_filters_by_length(self) -> None:
        dictionary = WordDictionary.from_words(["heron", "ibis", "kestrel", "rook"])
        self.assertEqual(dictionary.words(4, 4), ["IBIS", "ROOK"])
        self.assertEqual(dictionary.words(5), ["HERON", "KESTREL"])
        self.assertEqual(len(dictionary), 4)

    def test_missing_or_empty_sources_raise(self) -> None:
        with self.assertRaises(DictionaryLoadError):
            WordDictionary(DictionaryConfig(path=Path("does/not/exist.txt")))
        with self.assertRaises(DictionaryLoadError):
            WordDictionary.from_words(["a", "#", "  "])

    def test_bundled_word_list(self) -> None:
        dictionary = WordDictionary()
        self.assertGreater(len(dictionary), 200)
        self.assertTrue(all(word.isalpha() and word.isupper() for word in dictionary))
        self.assertTrue(dictionary.words(4, 5))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
