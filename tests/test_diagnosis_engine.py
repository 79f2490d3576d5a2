"""
Тести для модуля diagnosis_engine

Запуск: pytest tests/test_diagnosis_engine.py -v
"""

from pathlib import Path

import pytest

# Шляхи
DATA_PATH = Path(__file__).parent.parent / "data" / "knowledge_base.yaml"

THRESHOLDS = {
    "adult_age": 19,
    "fever_emergency": 39.0,
    "fever_diagnosis": 37.5,
    "slow_heart_rate_emergency": 40,
    "slow_heart_rate_child": 70,
    "slow_heart_rate_adult": 60,
    "cf_remove": -0.2,
    "cf_conclude": 0.8,
}


def _provider(symptoms: dict, diseases: list):
    from ehrlich.knowledge import CatalogKnowledgeProvider
    return CatalogKnowledgeProvider.from_dict({
        "thresholds": THRESHOLDS,
        "symptoms": symptoms,
        "diseases": diseases,
    })


def _fever_rash_provider():
    """A = [fever 0.6, rash 0.4], B = [fever 0.3]"""
    return _provider(
        symptoms={
            "fever": {"text": "Body temperature?", "weight": 0.6, "kind": "fever"},
            "rash": {"text": "Rash?", "weight": 0.4},
        },
        diseases=[
            {"disease_id": "a", "full_name": "Disease A", "symptoms": ["fever", "rash"]},
            {"disease_id": "b", "full_name": "Disease B", "symptoms": ["fever"],
             "symptom_weights": {"fever": 0.3}},
        ],
    )


def _patient(age=10, sex="female", name="Juan"):
    from ehrlich.schemas import Patient
    return Patient(name=name, age=age, sex=sex)


def _session(provider, patient=None, config=None):
    from ehrlich.diagnosis_engine import DiagnosticSession
    return DiagnosticSession(patient or _patient(), provider, config=config)


def _answer_all(session, answer_func, limit=100):
    """Відповідати до діагнозу; повертає задані питання"""
    from ehrlich.diagnosis_engine import EmergencyRaised, NextQuestion

    asked = []
    event = session.initial_event
    while session.is_active and len(asked) < limit:
        if isinstance(event, EmergencyRaised):
            event = event.follow_up
        assert isinstance(event, NextQuestion)
        asked.append(event.symptom_id)
        event = session.submit(answer_func(event))
    return asked


# =============================================================================
# SESSION
# =============================================================================

def test_session_creation():
    """Тест створення сесії"""
    from ehrlich.diagnosis_engine import NextQuestion, SessionStatus

    session = _session(_fever_rash_provider())

    assert session.status == SessionStatus.AWAITING_ANSWER
    assert session.i == 0 and session.j == 0
    assert session.emergency is False
    assert isinstance(session.initial_event, NextQuestion)
    assert session.initial_event.symptom_id == "fever"
    assert session.initial_event.is_numeric_prompt is True
    assert session.cf_table() == {"Disease A": "0.00", "Disease B": "0.00"}

    print(f"✓ Session created: {session}")


def test_fever_scenario():
    """Температура 39.5 у дитини: невідкладний стан і спільне свідчення"""
    from ehrlich.diagnosis_engine import Diagnosed, EmergencyRaised, NextQuestion

    session = _session(_fever_rash_provider())

    event = session.submit("39.5")

    assert isinstance(event, EmergencyRaised)
    assert isinstance(event.follow_up, NextQuestion)
    assert event.follow_up.symptom_id == "rash"
    assert session.is_emergency() is True
    assert session.report.cf_values()["a"] == pytest.approx(0.6)
    assert session.report.cf_values()["b"] == pytest.approx(0.3)
    assert session.cf_table() == {"Disease A": "0.60", "Disease B": "0.30"}

    event = session.submit("yes")

    # Прапорець вже встановлено: друге EmergencyRaised не повертається
    assert isinstance(event, Diagnosed)
    report = event.report
    assert report.disease_id == "a"
    assert report.cf == pytest.approx(0.76)
    assert report.confidence_percent == pytest.approx(76.0)
    assert report.emergency is True
    assert report.concluded_early is False
    assert report.questions_asked == 2
    assert report.description.startswith("EMERGENCY")

    print(f"✓ Diagnosis: {report.full_name} ({report.confidence_percent:.1f}%)")


def test_all_answers_negative():
    """Всі відповіді "ні": діагноз з найменш від'ємним CF і 0%"""
    from ehrlich.diagnosis_engine import Diagnosed, SessionStatus

    session = _session(_fever_rash_provider(), _patient(age=30, sex="male"))

    event = session.submit("36.5")

    assert isinstance(event, Diagnosed)
    assert session.status == SessionStatus.DIAGNOSED
    assert all(d.eliminated for d in session.diseases)

    report = event.report
    assert report.disease_id == "b"
    assert report.cf == pytest.approx(-0.3)
    assert report.confidence_percent == 0.0
    assert report.questions_asked == 1
    assert "larger hospital" in report.description


def test_invalid_answer_keeps_state():
    """Некоректна відповідь: питання повторюється, стан не змінюється"""
    from ehrlich.diagnosis_engine import InvalidInput

    session = _session(_fever_rash_provider())

    event = session.submit("abc")

    assert isinstance(event, InvalidInput)
    assert event.reason
    assert event.question.symptom_id == "fever"
    assert session.i == 0 and session.j == 0
    assert session.cf_table() == {"Disease A": "0.00", "Disease B": "0.00"}
    assert session.answers == []
    assert session.is_active

    session.submit("38")
    event = session.submit("maybe")
    assert isinstance(event, InvalidInput)
    assert event.question.symptom_id == "rash"


def test_submit_on_terminal_session():
    from ehrlich.exceptions import SubmitOnTerminalSession

    session = _session(_fever_rash_provider(), _patient(age=30, sex="male"))
    session.submit("36.5")

    with pytest.raises(SubmitOnTerminalSession):
        session.submit("yes")

    with pytest.raises(RuntimeError):
        session.current_question()

    assert session.report.final_diagnosis().disease_id == "b"


def test_final_diagnosis_before_end():
    session = _session(_fever_rash_provider())

    with pytest.raises(RuntimeError):
        session.report.final_diagnosis()

    assert session.current_question().symptom_id == "fever"


def test_concluded_early_rescans_all_diseases():
    """Поріг CF_CONCLUDE зупиняє сесію, але обирається максимальний CF"""
    from ehrlich.diagnosis_engine import Diagnosed

    provider = _provider(
        symptoms={
            "s1": {"text": "S1?", "weight": 0.6},
            "s2": {"text": "S2?", "weight": 0.6},
            "s3": {"text": "S3?", "weight": 0.5},
        },
        diseases=[
            {"disease_id": "a", "full_name": "A", "symptoms": ["s1", "s2"]},
            {"disease_id": "b", "full_name": "B", "symptoms": ["s2"],
             "symptom_weights": {"s2": 0.9}},
            {"disease_id": "c", "full_name": "C", "symptoms": ["s3"]},
        ],
    )
    session = _session(provider)

    session.submit("yes")
    event = session.submit("yes")

    assert isinstance(event, Diagnosed)
    assert event.report.concluded_early is True
    assert event.report.disease_id == "b"
    assert event.report.cf == pytest.approx(0.9)
    assert event.report.questions_asked == 2
    assert [r.disease_id for r in event.report.ranking] == ["b", "a", "c"]


def test_shared_evidence_disabled():
    """Без спільного свідчення кожна хвороба питає свої симптоми"""
    from ehrlich.config import EhrlichConfig
    from ehrlich.diagnosis_engine import Diagnosed, NextQuestion

    config = EhrlichConfig()
    config.engine.shared_evidence = False
    session = _session(_fever_rash_provider(), config=config)

    session.submit("38")
    assert session.report.cf_values() == pytest.approx({"a": 0.6, "b": 0.0})

    event = session.submit("yes")
    assert isinstance(event, NextQuestion)
    assert event.symptom_id == "fever"
    assert event.disease_id == "b"

    event = session.submit("38")
    assert isinstance(event, Diagnosed)
    assert event.report.disease_id == "a"
    assert session.report.cf_values()["b"] == pytest.approx(0.3)


def test_no_duplicate_questions():
    """Симптом не питається двічі"""
    from ehrlich.knowledge import CatalogKnowledgeProvider

    provider = CatalogKnowledgeProvider.from_file(str(DATA_PATH))

    def negative(question):
        if question.is_numeric_prompt:
            return "80" if "heart" in question.symptom_id else "36.6"
        return "no"

    counter = {"n": 0}

    def alternating(question):
        counter["n"] += 1
        if question.is_numeric_prompt:
            return "38"
        return "yes" if counter["n"] % 2 else "no"

    for answer_func in (negative, alternating):
        for patient in (_patient(age=8, sex="female"), _patient(age=45, sex="male")):
            session = _session(provider, patient)
            asked = _answer_all(session, answer_func)

            assert not session.is_active
            assert len(asked) == len(set(asked))


def test_emergency_flag_is_sticky():
    """Прапорець невідкладного стану не скидається"""
    from ehrlich.diagnosis_engine import Diagnosed, EmergencyRaised, NextQuestion

    provider = _provider(
        symptoms={
            "chest_pain": {"text": "Chest pain?", "weight": 0.3, "kind": "critical"},
            "s1": {"text": "S1?", "weight": 0.5},
            "s2": {"text": "S2?", "weight": 0.5},
        },
        diseases=[
            {"disease_id": "a", "full_name": "A", "symptoms": ["chest_pain", "s1"]},
            {"disease_id": "b", "full_name": "B", "symptoms": ["s2"]},
        ],
    )
    session = _session(provider, _patient(age=40))

    event = session.submit("yes")
    assert isinstance(event, EmergencyRaised)
    assert event.follow_up.symptom_id == "s1"

    event = session.submit("no")
    assert isinstance(event, NextQuestion)
    assert event.symptom_id == "s2"
    assert session.diseases[0].eliminated is True
    assert session.emergency is True

    event = session.submit("no")
    assert isinstance(event, Diagnosed)
    assert event.report.emergency is True
    assert event.report.disease_id == "a"
    assert event.report.confidence_percent == 0.0


def test_applicability_filtering():
    """Жіночі симптоми для чоловіків і дитячі для дорослих не питаються"""
    provider = _provider(
        symptoms={
            "vaginal_dryness": {"text": "VD?", "weight": 0.3, "female_only": True},
            "failure_to_thrive": {"text": "FTT?", "weight": 0.5, "pediatric_only": True},
            "s1": {"text": "S1?", "weight": 0.5},
        },
        diseases=[
            {"disease_id": "a", "full_name": "A", "symptoms": ["vaginal_dryness"]},
            {"disease_id": "b", "full_name": "B", "symptoms": ["failure_to_thrive", "s1"]},
        ],
    )

    man = _session(provider, _patient(age=30, sex="male"))

    assert man.i == 1
    assert man.initial_event.symptom_id == "s1"
    assert man.filtered_symptoms == {
        "female_only": ["vaginal_dryness"],
        "pediatric_only": ["failure_to_thrive"],
    }

    girl = _session(provider, _patient(age=8, sex="female"))

    assert girl.i == 0
    assert girl.initial_event.symptom_id == "vaginal_dryness"
    assert girl.filtered_symptoms == {"female_only": [], "pediatric_only": []}

    # Дорослий віком рівно adult_age
    woman = _session(provider, _patient(age=19, sex="female"))
    assert "failure_to_thrive" in woman.filtered_symptoms["pediatric_only"]


def test_all_symptoms_filtered():
    """Всі хвороби без симптомів: діагноз одразу"""
    from ehrlich.diagnosis_engine import Diagnosed, SessionStatus

    provider = _provider(
        symptoms={"vaginal_dryness": {"text": "VD?", "weight": 0.3, "female_only": True}},
        diseases=[{"disease_id": "a", "full_name": "A", "symptoms": ["vaginal_dryness"]}],
    )
    session = _session(provider, _patient(age=30, sex="male"))

    assert isinstance(session.initial_event, Diagnosed)
    assert session.status == SessionStatus.DIAGNOSED
    assert session.result.questions_asked == 0
    assert session.result.confidence_percent == 0.0


def test_provider_unavailable():
    """Порожній або несправний провайдер"""
    from ehrlich.exceptions import ProviderUnavailable
    from ehrlich.knowledge import CatalogKnowledgeProvider

    with pytest.raises(ProviderUnavailable):
        _session(_provider(symptoms={}, diseases=[]))

    class BrokenProvider(CatalogKnowledgeProvider):
        def thresholds(self):
            raise ConnectionError("knowledge server is down")

    broken = BrokenProvider({"symptoms": {}, "diseases": []})

    with pytest.raises(ProviderUnavailable) as exc:
        _session(broken)
    assert isinstance(exc.value.cause, ConnectionError)

    class NoThresholdsProvider(CatalogKnowledgeProvider):
        def thresholds(self):
            return None

    silent = NoThresholdsProvider({
        "symptoms": {"s1": {"text": "S1?", "weight": 0.5}},
        "diseases": [{"disease_id": "a", "full_name": "A", "symptoms": ["s1"]}],
    })

    with pytest.raises(ProviderUnavailable):
        _session(silent)


def _three_disease_provider(initial_cf: dict):
    """A = [s1], B = [s2], C = [s3] з початковими CF"""
    return _provider(
        symptoms={
            "s1": {"text": "S1?", "weight": 0.5},
            "s2": {"text": "S2?", "weight": 0.5},
            "s3": {"text": "S3?", "weight": 0.5},
        },
        diseases=[
            {"disease_id": d, "full_name": d.upper(), "symptoms": [s],
             "initial_cf": initial_cf.get(d, 0.0)}
            for d, s in (("a", "s1"), ("b", "s2"), ("c", "s3"))
        ],
    )


def test_ruled_out_first_disease_is_skipped():
    """Початковий CF нижче CF_REMOVE у першої хвороби: питань про неї немає"""
    from ehrlich.config import EhrlichConfig

    config = EhrlichConfig()
    config.engine.shared_evidence = False
    session = _session(_three_disease_provider({"a": -0.5}), config=config)

    assert session.i == 1
    assert session.initial_event.disease_id == "b"
    assert session.initial_event.symptom_id == "s2"
    assert session.diseases[0].eliminated is True


def test_ruled_out_later_disease_is_skipped():
    """Той самий критерій для хвороби з індексом > 0"""
    from ehrlich.config import EhrlichConfig
    from ehrlich.diagnosis_engine import NextQuestion

    config = EhrlichConfig()
    config.engine.shared_evidence = False
    session = _session(_three_disease_provider({"b": -0.5}), config=config)

    assert session.initial_event.disease_id == "a"

    event = session.submit("yes")

    assert isinstance(event, NextQuestion)
    assert event.disease_id == "c"
    assert session.diseases[1].eliminated is True
    assert session.diseases[1].remaining == ["s2"]


def test_all_diseases_ruled_out_at_start():
    from ehrlich.diagnosis_engine import Diagnosed

    session = _session(_three_disease_provider({"a": -0.5, "b": -0.5, "c": -0.5}))

    assert isinstance(session.initial_event, Diagnosed)
    assert all(d.eliminated for d in session.diseases)
    assert session.result.questions_asked == 0


def test_shared_symptom_rules_out_later_disease():
    """Спільний симптом опускає CF наступної хвороби нижче порогу: її пропускають"""
    from ehrlich.diagnosis_engine import Diagnosed

    provider = _provider(
        symptoms={
            "s1": {"text": "S1?", "weight": 0.1},
            "s2": {"text": "S2?", "weight": 0.6},
            "s3": {"text": "S3?", "weight": 0.5},
            "s4": {"text": "S4?", "weight": 0.5},
        },
        diseases=[
            {"disease_id": "a", "full_name": "A", "symptoms": ["s1", "s2"]},
            {"disease_id": "b", "full_name": "B", "symptoms": ["s1", "s3"],
             "symptom_weights": {"s1": 0.5}},
            {"disease_id": "c", "full_name": "C", "symptoms": ["s4"]},
        ],
    )
    session = _session(provider)

    answers = {"s1": "no", "s2": "yes", "s4": "yes"}
    asked = _answer_all(session, lambda q: answers[q.symptom_id])

    assert asked == ["s1", "s2", "s4"]
    assert session.diseases[0].eliminated is False
    assert session.diseases[1].eliminated is True
    assert session.diseases[1].remaining == ["s3"]
    assert session.report.cf_values() == pytest.approx({"a": 0.5 / 0.9, "b": -0.5, "c": 0.5})

    assert isinstance(session.last_event, Diagnosed)
    assert session.result.disease_id == "a"


def test_shared_symptom_updates_eliminated_disease():
    """Відповідь оновлює і раніше відкинуту хворобу, але питань про неї вже немає"""
    from ehrlich.diagnosis_engine import Diagnosed

    provider = _provider(
        symptoms={
            "s1": {"text": "S1?", "weight": 0.5},
            "s2": {"text": "S2?", "weight": 0.5},
            "s3": {"text": "S3?", "weight": 0.3},
        },
        diseases=[
            {"disease_id": "a", "full_name": "A", "symptoms": ["s1", "s2"]},
            {"disease_id": "b", "full_name": "B", "symptoms": ["s3", "s2"],
             "symptom_weights": {"s2": 0.8}},
        ],
    )
    session = _session(provider)

    answers = {"s1": "no", "s3": "yes", "s2": "yes"}
    asked = _answer_all(session, lambda q: answers[q.symptom_id])

    assert asked == ["s1", "s3", "s2"]
    assert session.answers[-1].updated == pytest.approx({"a": 0.0, "b": 0.86})
    assert session.report.cf_values() == pytest.approx({"a": 0.0, "b": 0.86})
    assert session.diseases[0].eliminated is True
    assert session.diseases[0].remaining == []

    assert isinstance(session.last_event, Diagnosed)
    assert session.result.disease_id == "b"
    assert session.result.concluded_early is True


def test_answer_log():
    """Журнал відповідей"""
    session = _session(_fever_rash_provider())
    session.submit("39.5")

    record = session.answers[0]
    assert record.symptom_id == "fever"
    assert record.raw_answer == "39.5"
    assert record.affirmed is True
    assert record.emergency_hit is True
    assert record.evidence == pytest.approx(0.6)
    assert record.disease_id == "a"
    assert record.updated == pytest.approx({"a": 0.6, "b": 0.3})
    assert session.n_questions_asked == 1


# =============================================================================
# REPORT
# =============================================================================

def test_session_report_views():
    """Тест представлень SessionReport"""
    session = _session(_fever_rash_provider())
    session.submit("39.5")

    report = session.report

    log = report.format_cf_log("fever")
    assert log.startswith("Symptom: fever\nCertainty factors:")
    assert "DISEASE A: 0.60" in log
    assert "DISEASE B: 0.30" in log

    ranking = report.ranking()
    assert [r.disease_id for r in ranking] == ["a", "b"]
    assert ranking[0].rank == 1

    text = report.explain()
    assert "Disease A" in text
    assert "EMERGENCY" in text

    summary = report.get_summary()
    assert summary["status"] == "awaiting_answer"
    assert summary["current_question"]["symptom_id"] == "rash"
    assert summary["final_diagnosis"] is None

    print(text)


def test_ranking_ties_keep_catalog_order():
    from ehrlich.diagnosis_engine import rank_diseases

    session = _session(_fever_rash_provider())

    assert [r.disease_id for r in rank_diseases(session)] == ["a", "b"]
    assert len(rank_diseases(session, 1)) == 1


def test_event_serialization():
    from ehrlich.diagnosis_engine import EmergencyRaised

    session = _session(_fever_rash_provider())
    event = session.submit("39.5")

    assert isinstance(event, EmergencyRaised)
    data = event.to_dict()
    assert data["type"] == "emergency_raised"
    assert data["follow_up"]["type"] == "next_question"
    assert data["follow_up"]["symptom_id"] == "rash"


# =============================================================================
# ENGINE
# =============================================================================

def test_engine_restart():
    """Рестарт: база знань скидається один раз, стан як у нової сесії"""
    from ehrlich.diagnosis_engine import DiagnosisEngine

    provider = _fever_rash_provider()
    engine = DiagnosisEngine(provider)

    session = engine.start_session(_patient())
    session.submit("39.5")

    restarted = engine.restart(session)
    fresh = engine.start_session(_patient())

    assert provider.reset_count == 1
    assert restarted.session_id != session.session_id
    assert restarted.patient == session.patient
    assert restarted.answers == []
    assert restarted.emergency is False
    assert restarted.cf_table() == fresh.cf_table()
    assert restarted.initial_event == fresh.initial_event

    # Стара сесія не змінилась
    assert session.emergency is True


def test_run_full_diagnosis():
    from ehrlich.diagnosis_engine import DiagnosisEngine

    engine = DiagnosisEngine(_fever_rash_provider())

    report = engine.run_full_diagnosis(
        _patient(),
        lambda q: "38" if q.is_numeric_prompt else "yes",
    )

    assert report.disease_id == "a"
    assert report.cf == pytest.approx(0.76)
    assert report.emergency is False


def test_run_full_diagnosis_gives_up_on_invalid_answers():
    from ehrlich.diagnosis_engine import DiagnosisEngine
    from ehrlich.exceptions import InvalidAnswer

    engine = DiagnosisEngine(_fever_rash_provider())

    with pytest.raises(InvalidAnswer):
        engine.run_full_diagnosis(_patient(), lambda q: "abc", max_invalid_answers=3)


def test_engine_from_knowledge_file():
    from ehrlich.config import EhrlichConfig
    from ehrlich.diagnosis_engine import DiagnosisEngine
    from ehrlich.exceptions import ProviderUnavailable

    engine = DiagnosisEngine.from_knowledge_file(str(DATA_PATH))
    assert engine.n_diseases >= 5

    engine = DiagnosisEngine.from_config(EhrlichConfig(knowledge_path=str(DATA_PATH)))
    assert engine.n_diseases >= 5

    with pytest.raises(ProviderUnavailable):
        DiagnosisEngine.from_config(EhrlichConfig())

    print(f"✓ {engine}")
