"""Answer evaluation.

Evaluators never trust the bulk cache: each one looks the question's subject
up again through a targeted endpoint, which carries the complete alternate
spellings and capital/language lists.
"""
from __future__ import annotations

import dataclasses
import typing as t

from kartografi.answers import matches_any
from kartografi.question_key import QuestionKey, QuestionType
from kartografi.restcountries import RestCountriesClient

JsonDict = dict[str, t.Any]

MAX_EXAMPLE_ANSWERS = 5


@dataclasses.dataclass(frozen=True)
class AnswerResult:
    type: QuestionType
    correct: bool
    info: JsonDict

    def to_dict(self) -> JsonDict:
        return {"type": self.type.value, "correct": self.correct, "info": self.info}


def country_names(country: JsonDict) -> list[str]:
    name = country.get("name") or {}
    names = [name.get("common"), name.get("official"), *(country.get("altSpellings") or [])]
    return [n for n in names if n]


def evaluate_country(client: RestCountriesClient, key: QuestionKey, answer: str) -> AnswerResult:
    language_code = key.require("languageCode")
    language_name = key.metadata.get("languageName")
    speakers = client.by_language(language_code)

    for country in speakers:
        if matches_any(answer, country_names(country)):
            name = country.get("name") or {}
            return AnswerResult(
                type=QuestionType.COUNTRY,
                correct=True,
                info={
                    "language": language_name,
                    "matched": name.get("common") or name.get("official"),
                },
            )

    examples = [n for n in ((c.get("name") or {}).get("common") for c in speakers[:MAX_EXAMPLE_ANSWERS]) if n]
    return AnswerResult(
        type=QuestionType.COUNTRY,
        correct=False,
        info={"language": language_name, "acceptableAnswers": examples},
    )


def evaluate_main_city(client: RestCountriesClient, key: QuestionKey, answer: str) -> AnswerResult:
    cca3 = key.require("cca3")
    country = client.by_code(cca3, "name,capital")
    capitals = [c for c in (country.get("capital") or []) if c]

    return AnswerResult(
        type=QuestionType.MAIN_CITY,
        correct=matches_any(answer, capitals) is not None,
        info={
            "country": (country.get("name") or {}).get("common"),
            "capitals": capitals,
        },
    )


def evaluate_language(client: RestCountriesClient, key: QuestionKey, answer: str) -> AnswerResult:
    cca3 = key.require("cca3")
    country = client.by_code(cca3, "name,languages")
    languages: dict[str, str] = country.get("languages") or {}

    # both the ISO code ("slv") and the display name ("Slovene") are accepted
    correct = any(matches_any(answer, (code, name)) for code, name in languages.items())
    return AnswerResult(
        type=QuestionType.LANGUAGE,
        correct=correct,
        info={
            "country": (country.get("name") or {}).get("common"),
            "languages": list(languages.values()),
        },
    )


def evaluate_flag(client: RestCountriesClient, key: QuestionKey, answer: str) -> AnswerResult:
    cca3 = key.require("cca3")
    country = client.by_code(cca3, "name,altSpellings")

    return AnswerResult(
        type=QuestionType.FLAG,
        correct=matches_any(answer, country_names(country)) is not None,
        info={"country": (country.get("name") or {}).get("common")},
    )


EVALUATORS: dict[QuestionType, t.Callable[[RestCountriesClient, QuestionKey, str], AnswerResult]] = {
    QuestionType.COUNTRY: evaluate_country,
    QuestionType.MAIN_CITY: evaluate_main_city,
    QuestionType.LANGUAGE: evaluate_language,
    QuestionType.FLAG: evaluate_flag,
}
