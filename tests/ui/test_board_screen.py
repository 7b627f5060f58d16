"""Tests for the board screen: columns, keyboard and drag moves, CRUD."""

import asyncio

import pytest
from textual.widgets import Static

from taskdeck.permissions import PermissionPolicy
from taskdeck.reorder import DragState
from taskdeck.ui import BoardScreen, TaskdeckApp
from taskdeck.ui.detail import CommentRow, TaskDetailModal
from taskdeck.ui.forms import StageForm


async def _open_board(app, pilot, wait_for):
    await wait_for(pilot, lambda: app.projects.loaded)
    app.open_board(app.projects.get(1))
    await wait_for(pilot, lambda: isinstance(app.screen, BoardScreen) and len(app.screen.columns()) == 3)
    return app.screen


async def _settle(screen, pilot):
    """Wait for every background move commit, then for the UI to catch up."""
    await asyncio.gather(*list(screen.controller._commits), return_exceptions=True)
    await pilot.pause()


def _card_ids(screen, stage_id):
    return [c.task_id for c in screen.column_for(stage_id).cards()]


@pytest.mark.asyncio
async def test_board_shows_stages_in_order(app, wait_for):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)

        assert [c.stage.name for c in screen.columns()] == ["Todo", "Doing", "Done"]
        assert _card_ids(screen, 10) == [100, 101]
        assert _card_ids(screen, 11) == [102]
        assert _card_ids(screen, 12) == []
        assert screen.role == "owner"


@pytest.mark.asyncio
async def test_keyboard_move_is_optimistic(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        screen.column_for(10).cards()[0].focus()
        await pilot.pause()

        screen.action_move_task(1)
        assert screen.store.get(100).stage_id == 11
        assert screen.store.get(100).position == 1
        assert screen.controller.is_in_flight(100)

        await _settle(screen, pilot)
        assert not screen.controller.is_in_flight(100)
        assert backend.tasks[100]["stage_id"] == 11
        assert _card_ids(screen, 11) == [102, 100]
        assert _card_ids(screen, 10) == [101]


@pytest.mark.asyncio
async def test_failed_move_rolls_back(app, wait_for, backend):
    backend.fail_moves = True
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        screen.column_for(10).cards()[0].focus()
        await pilot.pause()

        screen.action_move_task(1)
        await _settle(screen, pilot)

        assert screen.store.get(100).stage_id == 10
        assert screen.store.get(100).position == 0
        assert _card_ids(screen, 10) == [100, 101]
        assert _card_ids(screen, 11) == [102]


@pytest.mark.asyncio
async def test_move_past_last_stage_does_nothing(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        screen.column_for(10).cards()[0].focus()
        await pilot.pause()

        screen.action_move_task(-1)
        assert screen.store.get(100).stage_id == 10
        assert backend.paths("PATCH") == []


@pytest.mark.asyncio
async def test_drop_on_column_moves_task(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        card = screen.column_for(10).cards()[1]
        done = screen.column_for(12)

        assert card.draggable_begin()
        assert done.drag_over(card, 0, 0)
        assert done.has_class("drop-target")
        assert screen.controller.dest_stage_id == 12
        assert done.try_drop(card, 0, 0)

        assert screen.controller.state is DragState.IDLE
        await _settle(screen, pilot)
        assert backend.tasks[101]["stage_id"] == 12
        assert backend.tasks[101]["position"] == 0
        assert _card_ids(screen, 12) == [101]


@pytest.mark.asyncio
async def test_cancelled_drag_leaves_store_alone(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        card = screen.column_for(10).cards()[0]
        doing = screen.column_for(11)

        assert card.draggable_begin()
        doing.drag_over(card, 0, 0)
        card._current_target = doing
        card._drag_cancel()

        assert screen.controller.state is DragState.IDLE
        assert not doing.has_class("drop-target")
        assert screen.store.get(100).stage_id == 10
        assert backend.paths("PATCH") == []


@pytest.mark.asyncio
async def test_locked_stage_refuses_drag(app, wait_for, backend):
    backend.stages[10]["allow_task_movement"] = False
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        card = screen.column_for(10).cards()[0]

        assert not card.draggable_begin()
        assert screen.controller.state is DragState.IDLE


@pytest.mark.asyncio
async def test_role_without_task_rights_cannot_move(settings, session, api, wait_for, backend):
    policy = PermissionPolicy(roles={"owner": frozenset()}, default_allow=False)
    app = TaskdeckApp(settings, session=session, api=api, policy=policy)
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        screen.column_for(10).cards()[0].focus()
        await pilot.pause()

        screen.action_move_task(1)
        assert screen.store.get(100).stage_id == 10
        assert backend.paths("PATCH") == []


@pytest.mark.asyncio
async def test_create_and_delete_task(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        done = screen.stages[2]

        task = await screen.create_task(done, {"title": "Celebrate", "priority": "P3"})
        await pilot.pause()
        assert task.stage_id == 12
        assert _card_ids(screen, 12) == [task.id]
        assert app.projects.get(1).task_count == 4

        assert await screen.delete_task(task.id)
        await pilot.pause()
        assert _card_ids(screen, 12) == []
        assert task.id not in backend.tasks
        assert app.projects.get(1).task_count == 3


@pytest.mark.asyncio
async def test_update_task_rerenders_card(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)

        await screen.update_task(100, {"title": "Write the docs", "due_date": "2000-01-01"})
        await pilot.pause()

        card = screen.column_for(10).cards()[0]
        assert card.record.title == "Write the docs"
        assert card.has_class("overdue")
        assert app.projects.get(1).overdue


@pytest.mark.asyncio
async def test_create_and_delete_stage(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)

        stage = await screen.create_stage({"name": "Review", "color": "#8B5CF6"})
        await pilot.pause()
        assert [c.stage.name for c in screen.columns()] == ["Todo", "Doing", "Done", "Review"]

        assert await screen.delete_stage(10)
        await pilot.pause()
        assert [c.stage_id for c in screen.columns()] == [11, 12, stage.id]
        assert screen.store.get(100) is None
        assert app.projects.get(1).task_count == 1


@pytest.mark.asyncio
async def test_leaving_board_closes_controller(app, wait_for):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        controller = screen.controller

        screen.action_close()
        await wait_for(pilot, lambda: controller.closed)

        assert not isinstance(app.screen, BoardScreen)


@pytest.mark.asyncio
async def test_card_opens_detail_with_comments(app, wait_for):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        card = screen.column_for(10).cards()[0]
        card.focus()
        await pilot.press("enter")

        await wait_for(
            pilot, lambda: isinstance(app.screen, TaskDetailModal) and len(app.screen.query(CommentRow)) > 0
        )
        rows = list(app.screen.query(CommentRow))
        assert len(rows) == 1
        assert rows[0].comment.author == "bob"


@pytest.mark.asyncio
async def test_bracketed_text_is_shown_literally(app, wait_for, backend):
    backend.projects[1]["name"] = "Demo [/] board"
    backend.tasks[100]["title"] = "Fix [/] parser"
    backend.tasks[101]["title"] = "Support [bold] list[int] args"
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)

        titles = [card.query_one("#card-title", Static).visual.plain for card in screen.column_for(10).cards()]
        assert titles[0].endswith("Fix [/] parser")
        assert titles[1].endswith("Support [bold] list[int] args")
        assert "Demo [/] board" in screen.query_one("#board-title", Static).visual.plain


@pytest.mark.asyncio
async def test_edit_stage(app, wait_for, backend):
    async with app.run_test(size=(120, 40)) as pilot:
        screen = await _open_board(app, pilot, wait_for)
        screen.column_for(11).cards()[0].focus()
        await pilot.pause()

        screen.action_edit_stage()
        await wait_for(pilot, lambda: isinstance(app.screen, StageForm))
        assert "Doing" in app.screen.form_title
        app.screen.query_one("#cancel").press()
        await wait_for(pilot, lambda: app.screen is screen)

        stage = await screen.update_stage(11, {"name": "In progress", "allow_task_movement": False})
        await pilot.pause()
        assert stage.name == "In progress"
        assert [c.stage.name for c in screen.columns()] == ["Todo", "In progress", "Done"]
        assert _card_ids(screen, 11) == [102]
        assert not screen.controller.can_drag(102)
        assert backend.stages[11]["name"] == "In progress"
