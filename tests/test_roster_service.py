import pytest

from physioai.schemas.patient import PatientStatus
from physioai.services.roster_service import (
    DuplicatePatientError,
    LogNotFoundError,
    PatientNotFoundError,
    add_patient,
    add_report,
    append_log,
    build_log,
    build_registered_patient,
    build_report,
    discharge,
    edit_log,
    find_patient,
    find_patient_by_email,
    parse_age,
    replace_patient,
    resolve_selected_patient,
)
from physioai.services.seed_service import seed_roster


@pytest.fixture
def roster():
    return seed_roster()


def test_append_log_adds_to_end_and_keeps_existing(roster):
    before = [log.model_copy() for log in find_patient(roster, "p1").logs]
    log = build_log(pain_score=2, max_rom=50, reps_completed=15, on="2023-11-20")

    updated = append_log(roster, "p1", log)

    logs = find_patient(updated, "p1").logs
    assert len(logs) == len(before) + 1
    assert logs[:-1] == before
    assert logs[-1] == log
    assert log.notes == "Patient self-logged session via mobile app"


def test_mutations_do_not_touch_input(roster):
    append_log(roster, "p1", build_log(pain_score=1, max_rom=1, reps_completed=1))
    discharge(roster, "p2")
    assert len(find_patient(roster, "p1").logs) == 5
    assert len(find_patient(roster, "p2").logs) == 2


def test_edit_log_changes_only_target(roster):
    updated = edit_log(roster, "p1", "l3", max_rom=33, pain_score=2)

    old = {log.id: log for log in find_patient(roster, "p1").logs}
    new = {log.id: log for log in find_patient(updated, "p1").logs}
    assert new["l3"].max_rom == 33
    assert new["l3"].pain_score == 2
    assert new["l3"].notes == old["l3"].notes
    assert new["l3"].reps_completed == old["l3"].reps_completed
    for log_id in ("l1", "l2", "l4", "l5"):
        assert new[log_id] == old[log_id]
    assert find_patient(updated, "p2") == find_patient(roster, "p2")


def test_edit_unknown_log_raises(roster):
    with pytest.raises(LogNotFoundError):
        edit_log(roster, "p1", "nope", max_rom=1, pain_score=1)


def test_replace_patient_never_duplicates(roster):
    p1 = find_patient(roster, "p1").model_copy(update={"status": PatientStatus.AHEAD})
    updated = replace_patient(roster, p1)
    assert [p.id for p in updated] == [p.id for p in roster]
    assert find_patient(updated, "p1").status == PatientStatus.AHEAD


def test_replace_unknown_patient_raises(roster):
    ghost = roster[0].model_copy(update={"id": "ghost"})
    with pytest.raises(PatientNotFoundError):
        replace_patient(roster, ghost)


def test_add_patient_prepends_and_rejects_duplicates(roster):
    newcomer = roster[1].model_copy(update={"id": "p3"})
    updated = add_patient(roster, newcomer)
    assert [p.id for p in updated] == ["p3", "p1", "p2"]
    with pytest.raises(DuplicatePatientError):
        add_patient(updated, newcomer)


def test_add_report_inserts_newest_first(roster):
    report = build_report(title="Week 2 Update", content="Keep it up", physio_name="Dr. Sarah Connor")
    updated = add_report(roster, "p1", report)
    reports = find_patient(updated, "p1").weekly_reports
    assert [r.id for r in reports] == [report.id, "r1"]


def test_discharge_wipes_logs_and_reports(roster):
    assert find_patient(roster, "p2").status == PatientStatus.BEHIND
    updated = discharge(roster, "p2")
    p2 = find_patient(updated, "p2")
    assert p2.logs == []
    assert p2.weekly_reports == []
    assert p2.status == PatientStatus.ON_TRACK
    assert p2.prescribed_exercises == find_patient(roster, "p2").prescribed_exercises


def test_find_by_email_is_case_insensitive(roster):
    assert find_patient_by_email(roster, "  ISHAAN.demo@Example.com ").id == "p1"
    assert find_patient_by_email(roster, "nobody@example.com") is None


def test_resolve_selected_patient_falls_back_to_first(roster):
    assert resolve_selected_patient(roster, "p2").id == "p2"
    assert resolve_selected_patient(roster, "missing").id == "p1"
    assert resolve_selected_patient(roster, None).id == "p1"
    assert resolve_selected_patient([], "p1") is None


def test_registered_patient_is_cut_from_template(roster):
    template = roster[0]
    patient = build_registered_patient(template, name=" Asha ", age="31y", email="asha@example.com", physio_name="Dr. X")

    assert patient.id != template.id
    assert patient.name == "Asha"
    assert patient.age == 31
    assert patient.logs == []
    assert patient.weekly_reports == []
    assert patient.injury_type == template.injury_type
    assert patient.benchmark_rom == template.benchmark_rom
    assert patient.prescribed_exercises == template.prescribed_exercises
    assert len(template.logs) == 5


@pytest.mark.parametrize(
    "value, expected",
    [(40, 40), ("52", 52), (" 19 ", 19), ("7abc", 7), ("abc", 25), ("", 25), (None, 25), ("0", 25), (0, 25)],
)
def test_parse_age(value, expected):
    assert parse_age(value, 25) == expected
