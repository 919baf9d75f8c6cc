from __future__ import annotations

import dataclasses
import secrets
import typing as t

from kartografi.errors import NoEligibleDataError
from kartografi.question_key import QuestionType, encode_key

JsonDict = dict[str, t.Any]
T = t.TypeVar("T")


@dataclasses.dataclass(frozen=True)
class QuizQuestion:
    type: QuestionType
    prompt: str
    question_key: str
    data: JsonDict

    def to_dict(self) -> JsonDict:
        return {
            "type": self.type.value,
            "prompt": self.prompt,
            "questionKey": self.question_key,
            "data": self.data,
        }


@dataclasses.dataclass
class LanguageAggregate:
    code: str
    name: str
    countries: set[str] = dataclasses.field(default_factory=set)


def pick_random(items: t.Sequence[T]) -> T:
    # picks must not be predictable from earlier questions
    return items[secrets.randbelow(len(items))]


def common_name(country: JsonDict) -> str | None:
    return (country.get("name") or {}).get("common")


def aggregate_languages(countries: t.Iterable[JsonDict]) -> dict[str, LanguageAggregate]:
    languages: dict[str, LanguageAggregate] = {}
    for country in countries:
        name = common_name(country)
        for code, language_name in (country.get("languages") or {}).items():
            entry = languages.setdefault(code, LanguageAggregate(code=code, name=language_name))
            if name:
                entry.countries.add(name)
    return languages


def build_country_question(countries: list[JsonDict]) -> QuizQuestion:
    eligible = [entry for entry in aggregate_languages(countries).values() if entry.countries]
    if not eligible:
        raise NoEligibleDataError("No languages available to generate a question")
    choice = pick_random(eligible)

    if len(choice.countries) > 1:
        prompt = f"Name a country where {choice.name} is an official language."
    else:
        prompt = f"Which country has {choice.name} as an official language?"

    return QuizQuestion(
        type=QuestionType.COUNTRY,
        prompt=prompt,
        question_key=encode_key(
            QuestionType.COUNTRY,
            {"languageCode": choice.code, "languageName": choice.name},
        ),
        data={
            "language": choice.name,
            "possibleAnswers": len(choice.countries),
        },
    )


def build_main_city_question(countries: list[JsonDict]) -> QuizQuestion:
    eligible = [
        c for c in countries
        if isinstance(c.get("capital"), list) and c["capital"] and c.get("cca3")
    ]
    if not eligible:
        raise NoEligibleDataError("No countries with capitals available")
    choice = pick_random(eligible)

    return QuizQuestion(
        type=QuestionType.MAIN_CITY,
        prompt=f"What is the capital city of {common_name(choice)}?",
        question_key=encode_key(QuestionType.MAIN_CITY, {"cca3": choice["cca3"]}),
        data={"country": common_name(choice)},
    )


def build_language_question(countries: list[JsonDict]) -> QuizQuestion:
    eligible = [c for c in countries if c.get("languages") and c.get("cca3")]
    if not eligible:
        raise NoEligibleDataError("No countries with language data available")
    choice = pick_random(eligible)

    return QuizQuestion(
        type=QuestionType.LANGUAGE,
        prompt=f"Name an official language of {common_name(choice)}.",
        question_key=encode_key(QuestionType.LANGUAGE, {"cca3": choice["cca3"]}),
        data={
            "country": common_name(choice),
            "languageCount": len(choice["languages"]),
        },
    )


def build_flag_question(countries: list[JsonDict]) -> QuizQuestion:
    eligible = [c for c in countries if (c.get("flags") or {}).get("png") and c.get("cca3")]
    if not eligible:
        raise NoEligibleDataError("No countries with flag data available")
    choice = pick_random(eligible)
    flags = choice["flags"]

    return QuizQuestion(
        type=QuestionType.FLAG,
        prompt="Which country does this flag belong to?",
        question_key=encode_key(QuestionType.FLAG, {"cca3": choice["cca3"]}),
        data={
            "flagUrl": flags["png"],
            "flagAlt": flags.get("alt") or f"Flag of {common_name(choice)}",
        },
    )


BUILDERS: dict[QuestionType, t.Callable[[list[JsonDict]], QuizQuestion]] = {
    QuestionType.COUNTRY: build_country_question,
    QuestionType.MAIN_CITY: build_main_city_question,
    QuestionType.LANGUAGE: build_language_question,
    QuestionType.FLAG: build_flag_question,
}
