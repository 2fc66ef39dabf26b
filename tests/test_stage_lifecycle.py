from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError


def _project_with_stages(ps, name="Lifecycle Project"):
    return ps.create_project(
        name,
        "em_producao",
        client_id="client-1",
        main_consultant_id="consultant-1",
        total_value=1000,
        main_consultant_value=400,
        stages=[
            {"name": "Zeta", "status": "iniciar_projeto", "value": 500, "end_date": date(2024, 1, 10)},
            {"name": "Alpha", "status": "em_producao", "value": 300},
            {"name": "Mid", "status": "concluido", "value": 200},
        ],
    )


def test_stages_keep_insertion_order(services):
    ps = services["project_service"]

    project = _project_with_stages(ps)
    loaded = ps.get_project(project.id)

    assert [s.name for s in loaded.stages] == ["Zeta", "Alpha", "Mid"]
    assert [s.stage_order for s in loaded.stages] == [0, 1, 2]

    added = ps.add_stage(project.id, "Omega", "em_producao", 100)
    assert added.stage_order == 3
    assert [s.name for s in ps.get_project(project.id).stages][-1] == "Omega"


def test_stage_created_in_completion_status_is_completed(services):
    ps = services["project_service"]

    project = _project_with_stages(ps)

    assert [s.completed for s in project.stages] == [False, False, True]


def test_completion_sets_completed_and_leaving_it_keeps_the_flag(services):
    ps = services["project_service"]
    ss = services["stage_service"]

    project = _project_with_stages(ps)
    stage = project.stages[0]

    done = ss.set_stage_status(stage.id, "concluido", changed_by="Ana")
    assert done.completed is True
    assert done.completed_at is not None

    reopened = ss.set_stage_status(stage.id, "em_producao")
    assert reopened.status == "em_producao"
    assert reopened.completed is True


def test_status_change_appends_history_with_previous_status(services):
    ps = services["project_service"]
    ss = services["stage_service"]

    project = _project_with_stages(ps)
    stage = project.stages[1]

    ss.set_stage_status(stage.id, "aguardando_aprovacao", changed_by="Ana")
    ss.set_stage_status(stage.id, "aguardando_nota_fiscal")

    history = ss.list_stage_history(stage.id)
    assert [(h.previous_status, h.status) for h in history] == [
        ("em_producao", "aguardando_aprovacao"),
        ("aguardando_aprovacao", "aguardando_nota_fiscal"),
    ]
    assert history[0].changed_by == "Ana"
    assert history[1].changed_by == "Sistema"
    assert len(ss.list_stage_history(project_id=project.id)) == 2

    with pytest.raises(ValueError):
        ss.list_stage_history()


def test_set_stage_status_rejects_unknown_status_and_missing_stage(services):
    ps = services["project_service"]
    ss = services["stage_service"]

    project = _project_with_stages(ps)

    with pytest.raises(ValidationError) as exc:
        ss.set_stage_status(project.stages[0].id, "not_a_status")
    assert exc.value.code == "STATUS_UNKNOWN"

    with pytest.raises(NotFoundError) as exc:
        ss.set_stage_status("missing-stage", "concluido")
    assert exc.value.code == "STAGE_NOT_FOUND"

    assert ss.list_stage_history(project.stages[0].id) == []


def test_progress_counts_completion_statuses(services):
    ps = services["project_service"]
    ss = services["stage_service"]

    project = _project_with_stages(ps)
    progress = ss.progress_for(project.id)
    assert (progress.completed, progress.total) == (1, 3)

    ss.set_stage_status(project.stages[0].id, "concluido")
    progress = ss.progress_for(project.id)
    assert (progress.completed, progress.total) == (2, 3)
    assert progress.percent == 66.7

    with pytest.raises(NotFoundError):
        ss.progress_for("missing-project")


def test_set_stage_flags_updates_checklist_only(services):
    ps = services["project_service"]
    ss = services["stage_service"]

    project = _project_with_stages(ps)
    stage = project.stages[1]

    updated = ss.set_stage_flags(stage.id, client_approved=True, invoice_issued=True)
    assert updated.client_approved is True
    assert updated.invoice_issued is True
    assert updated.payment_received is False
    assert updated.status == "em_producao"

    with pytest.raises(TypeError):
        ss.set_stage_flags(stage.id, approved_by_boss=True)


def test_create_project_validates_before_writing(services):
    ps = services["project_service"]

    with pytest.raises(ValidationError) as exc:
        ps.create_project(
            "Broken Project",
            "em_producao",
            stages=[
                {"name": "Ok", "status": "em_producao"},
                {"name": "Bad", "status": "em_producao", "start_date": date(2024, 2, 1), "end_date": date(2024, 1, 1)},
            ],
        )
    assert exc.value.code == "STAGE_INVALID_DATES"
    assert ps.list_projects() == []

    ps.create_project("Unique Name", "em_producao")
    with pytest.raises(ValidationError) as exc:
        ps.create_project("unique name", "em_producao")
    assert exc.value.code == "PROJECT_NAME_DUPLICATE"
