import os
import sys
import unittest
from unittest.mock import patch

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import country_fixtures
from kartografi.builders import (
    BUILDERS,
    aggregate_languages,
    build_country_question,
    build_flag_question,
    build_language_question,
    build_main_city_question,
)
from kartografi.errors import NoEligibleDataError
from kartografi.question_key import QuestionType, decode_key


class TestLanguageAggregate(unittest.TestCase):
    def test_groups_countries_by_language_code(self):
        languages = aggregate_languages(country_fixtures.countries())
        self.assertEqual(languages["deu"].name, "German")
        self.assertEqual(languages["deu"].countries, {"Austria", "Germany"})
        self.assertEqual(languages["slv"].countries, {"Slovenia"})
        self.assertNotIn("eng", languages)


class TestBuilders(unittest.TestCase):
    def setUp(self):
        self.countries = country_fixtures.countries()

    def test_country_question_singular_prompt(self):
        with patch("kartografi.builders.pick_random", side_effect=lambda items: next(e for e in items if e.code == "slv")):
            q = build_country_question(self.countries)

        self.assertEqual(q.type, QuestionType.COUNTRY)
        self.assertEqual(q.prompt, "Which country has Slovene as an official language?")
        self.assertEqual(q.data, {"language": "Slovene", "possibleAnswers": 1})
        self.assertEqual(
            decode_key(q.question_key).metadata,
            {"languageCode": "slv", "languageName": "Slovene"},
        )

    def test_country_question_plural_prompt(self):
        with patch("kartografi.builders.pick_random", side_effect=lambda items: next(e for e in items if e.code == "deu")):
            q = build_country_question(self.countries)

        self.assertEqual(q.prompt, "Name a country where German is an official language.")
        self.assertEqual(q.data["possibleAnswers"], 2)

    def test_main_city_question(self):
        with patch("kartografi.builders.secrets.randbelow", return_value=0):
            q = build_main_city_question(self.countries)

        self.assertEqual(q.prompt, "What is the capital city of Slovenia?")
        self.assertEqual(q.data, {"country": "Slovenia"})
        key = decode_key(q.question_key)
        self.assertEqual((key.type, key.metadata), (QuestionType.MAIN_CITY, {"cca3": "SVN"}))
        self.assertNotIn("Ljubljana", str(q.to_dict()))

    def test_main_city_skips_countries_without_capital(self):
        for _ in range(30):
            q = build_main_city_question(self.countries)
            self.assertNotEqual(decode_key(q.question_key).metadata["cca3"], "ATA")

    def test_language_question(self):
        with patch("kartografi.builders.pick_random", side_effect=lambda items: items[-1]):
            q = build_language_question(self.countries)

        self.assertEqual(q.prompt, "Name an official language of Switzerland.")
        self.assertEqual(q.data, {"country": "Switzerland", "languageCount": 4})
        self.assertEqual(decode_key(q.question_key).metadata, {"cca3": "CHE"})

    def test_flag_question_uses_alt_text(self):
        with patch("kartografi.builders.pick_random", side_effect=lambda items: items[0]):
            q = build_flag_question(self.countries)

        self.assertEqual(q.prompt, "Which country does this flag belong to?")
        self.assertEqual(q.data, {
            "flagUrl": "https://flagcdn.com/w320/si.png",
            "flagAlt": "The flag of Slovenia",
        })

    def test_flag_question_default_alt_text(self):
        with patch("kartografi.builders.pick_random", side_effect=lambda items: next(c for c in items if c["cca3"] == "CZE")):
            q = build_flag_question(self.countries)
        self.assertEqual(q.data["flagAlt"], "Flag of Czechia")

    def test_to_dict_shape(self):
        q = build_flag_question(self.countries)
        self.assertEqual(set(q.to_dict()), {"type", "prompt", "questionKey", "data"})
        self.assertEqual(q.to_dict()["type"], "flag")

    def test_no_eligible_data(self):
        for qt, builder in BUILDERS.items():
            with self.subTest(type=qt.value):
                with self.assertRaises(NoEligibleDataError):
                    builder([country_fixtures.ANTARCTICA] if qt != QuestionType.FLAG else [])

    def test_flag_requires_country_code(self):
        no_code = dict(country_fixtures.SLOVENIA, cca3="")
        with self.assertRaises(NoEligibleDataError):
            build_flag_question([no_code])

    def test_repeated_questions_are_random_and_decodable(self):
        keys = {build_flag_question(self.countries).question_key for _ in range(25)}
        self.assertGreater(len(keys), 1)
        for key in keys:
            self.assertEqual(decode_key(key).type, QuestionType.FLAG)


if __name__ == "__main__":
    unittest.main()
