#!/usr/bin/env python3
"""
EHRLICH — Консультація в терміналі

Запуск:
    python scripts/run_console.py
    python scripts/run_console.py --name Maria --age 34 --sex female
    python scripts/run_console.py --knowledge data/knowledge_base.yaml --log
"""

import sys
import argparse
from pathlib import Path

# Додаємо корінь проекту до path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ehrlich.diagnosis_engine import (
    DiagnosisEngine,
    Diagnosed,
    EmergencyRaised,
    InvalidInput,
    NextQuestion,
)
from ehrlich.exceptions import ProviderUnavailable
from ehrlich.schemas import Patient


def print_header(text):
    print("\n" + "=" * 60)
    print(f" {text}")
    print("=" * 60)


def ask_patient(args) -> Patient:
    """Дані пацієнта з аргументів або з клавіатури"""
    name = args.name or input("Patient name: ").strip()
    
    age = args.age
    while age is None:
        try:
            age = float(input("Age: "))
            if age < 0:
                raise ValueError
        except ValueError:
            print("  Input a valid number for the patient's age")
            age = None
    
    sex = args.sex
    while sex not in ("male", "female"):
        sex = input("Sex (male/female): ").strip().lower()
    
    return Patient(name=name, age=age, sex=sex)


def consult(engine: DiagnosisEngine, patient: Patient, show_log: bool) -> str:
    """
    Одна консультація.
    
    Returns:
        "restart" або "quit"
    """
    session = engine.start_session(patient)
    report = session.report
    
    print_header(f"EHRLICH is ready for diagnosis ({engine.n_diseases} diseases)")
    if session.filtered_symptoms["female_only"]:
        print(f"Female-specific symptoms removed: {', '.join(session.filtered_symptoms['female_only'])}")
    if session.filtered_symptoms["pediatric_only"]:
        print(f"Pediatric symptoms removed: {', '.join(session.filtered_symptoms['pediatric_only'])}")
    
    event = session.initial_event
    
    while True:
        if isinstance(event, EmergencyRaised):
            print("\n⚠️  EMERGENCY! Immediate medical attention is required.\n")
            event = event.follow_up
        
        if isinstance(event, InvalidInput):
            print(f"  Invalid input: {event.reason}")
            event = event.question
        
        if isinstance(event, Diagnosed):
            print_header("Diagnosis")
            print(event.report.description)
            print(f"\nDiagnosis is finished with confidence factor {event.report.confidence_percent:.1f}%.")
            if show_log:
                print("\n" + report.explain())
            break
        
        assert isinstance(event, NextQuestion)
        hint = "number" if event.is_numeric_prompt else "yes/no"
        raw = input(f"\n{event.text} [{hint}, 'restart', 'quit']: ").strip()
        
        if raw.lower() in ("restart", "quit"):
            return raw.lower()
        
        event = session.submit(raw)
        
        if show_log and session.answers and not isinstance(event, InvalidInput):
            print(report.format_cf_log(session.answers[-1].symptom_id))
    
    while True:
        choice = input("\nRestart with a new patient? (yes/no): ").strip().lower()
        if choice in ("yes", "y"):
            return "restart"
        if choice in ("no", "n"):
            return "quit"


def main():
    parser = argparse.ArgumentParser(description='EHRLICH console consultation')
    parser.add_argument('--knowledge', default=str(project_root / "data" / "knowledge_base.yaml"),
                        help='Knowledge base file (.yaml/.json)')
    parser.add_argument('--name', default=None, help='Patient name')
    parser.add_argument('--age', type=float, default=None, help='Patient age')
    parser.add_argument('--sex', choices=["male", "female"], default=None, help='Patient sex')
    parser.add_argument('--log', action='store_true', help='Show certainty factors after each answer')
    
    args = parser.parse_args()
    
    try:
        engine = DiagnosisEngine.from_knowledge_file(args.knowledge)
        print(f"✅ Knowledge base loaded: {args.knowledge}")
    except ProviderUnavailable as e:
        print(f"❌ Failed to load knowledge base: {e}")
        sys.exit(1)
    
    while True:
        patient = ask_patient(args)
        action = consult(engine, patient, args.log)
        
        if action == "quit":
            break
        
        # Новий пацієнт: скидаємо базу знань та аргументи пацієнта
        engine.provider.reset()
        args.name, args.age, args.sex = None, None, None


if __name__ == "__main__":
    main()
