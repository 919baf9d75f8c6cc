from __future__ import annotations

import logging
import typing as t

from kartografi.builders import BUILDERS, QuizQuestion
from kartografi.country_cache import CountryCache
from kartografi.errors import MissingParameterError, UnsupportedTypeError
from kartografi.evaluators import EVALUATORS, AnswerResult
from kartografi.question_key import QuestionType, decode_key
from kartografi.restcountries import RestCountriesClient

JsonDict = dict[str, t.Any]

log = logging.getLogger(__name__)


def _extract_answer(body: JsonDict) -> str:
    # "anwser" is what older clients send
    raw = body.get("anwser")
    if raw is None:
        raw = body.get("answer")
    return raw.strip() if isinstance(raw, str) else ""


class QuizService:
    def __init__(self, client: RestCountriesClient, cache: CountryCache) -> None:
        self.client = client
        self.cache = cache

    def generate_question(self, question_type: QuestionType | str) -> QuizQuestion:
        qt = QuestionType.parse(question_type) if isinstance(question_type, str) else question_type
        if qt is None:
            raise UnsupportedTypeError(f'Unsupported question type "{question_type}"')
        return BUILDERS[qt](self.cache.get_countries())

    def evaluate_answer(self, question_key: t.Any, answer: str) -> AnswerResult:
        key = decode_key(question_key)
        return EVALUATORS[key.type](self.client, key, answer)

    def handle(self, body: t.Any) -> JsonDict:
        """Single quiz entry point.

        Without an answer, `question` names a question type and a new
        question is returned. With one, `question` is the key of an earlier
        question and the answer is judged against it.
        """
        if not isinstance(body, dict):
            body = {}
        raw_question = body.get("question")
        if not isinstance(raw_question, str) or not raw_question.strip():
            raise MissingParameterError("Missing question parameter")

        question = raw_question.strip()
        answer = _extract_answer(body)

        if not answer:
            payload = self.generate_question(question)
            log.debug("Issued %s question", payload.type.value)
            return {"mode": "question", **payload.to_dict()}

        result = self.evaluate_answer(question, answer)
        log.debug("Evaluated %s answer: correct=%s", result.type.value, result.correct)
        return {"mode": "answer", **result.to_dict()}
