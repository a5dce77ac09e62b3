"""Tests for keyword routing."""

import pytest

from agentic_rag.models.domain import Route
from agentic_rag.routing.classifier import QuestionClassifier


@pytest.fixture
def classifier():
    return QuestionClassifier()


@pytest.mark.parametrize("question", ["", "   ", "\n\t", None])
def test_blank_question_defaults_to_transaction(classifier, question):
    assert classifier.classify(question) is Route.TRANSACTION


def test_no_keywords_defaults_to_transaction(classifier):
    assert classifier.classify("Bonjour, comment vas-tu ?") is Route.TRANSACTION


def test_document_only_terms(classifier):
    assert classifier.classify("Summarize the uploaded PDF's conclusions") is Route.DOCUMENT


def test_transaction_only_terms(classifier):
    assert classifier.classify("Montre le solde du compte 42") is Route.TRANSACTION


def test_balance_scenario_routes_to_transaction(classifier):
    # "what is" counts for documents, "balance" and "account" for transactions
    assert classifier.classify("What is the balance of account 42?") is Route.TRANSACTION


def test_tie_goes_to_documents():
    classifier = QuestionClassifier(document_keywords=("report",), transaction_keywords=("account",))
    assert classifier.classify("report for account") is Route.DOCUMENT


def test_more_transaction_terms_win():
    classifier = QuestionClassifier(
        document_keywords=("report",), transaction_keywords=("account", "balance")
    )
    assert classifier.classify("report on account balance") is Route.TRANSACTION


def test_keyword_counted_once_regardless_of_repetition():
    classifier = QuestionClassifier(
        document_keywords=("report",), transaction_keywords=("account", "balance")
    )
    assert classifier.classify("report report report account balance") is Route.TRANSACTION


def test_case_insensitive(classifier):
    assert classifier.classify("EXPLAIN THE METHODS OF THE REPORT") is Route.DOCUMENT


def test_repeated_classification_is_stable(classifier):
    q = "Décris les résultats de l'analyse"
    assert {classifier.classify(q) for _ in range(5)} == {Route.DOCUMENT}
