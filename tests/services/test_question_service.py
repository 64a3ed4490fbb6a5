from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from app.core.exceptions import ConflictError, ValidationError
from app.models.question import QuestionOption
from app.schemas.case_files import CaseFileCreate
from app.schemas.questions import CategoryCreate, OptionIn, QuestionCreate, QuestionUpdate, TagCreate
from app.services.catalog import case_file_service, taxonomy_service
from app.services.catalog.question_service import QuestionService
from tests.factories import create_game

pytestmark = pytest.mark.asyncio


async def test_create_question_applies_defaults(db_session):
    game = await create_game(db_session)

    question = await QuestionService(db_session).create_question(
        QuestionCreate(
            round_id=game["round"].id,
            title="Pricing",
            description="Set the launch price.",
            options=[OptionIn(text="Low"), OptionIn(text="High", points=20, is_correct=True)],
        )
    )

    assert question.min_reasoning_words == 15
    assert question.order == 0
    assert [(o.text, o.order) for o in question.options] == [("Low", 0), ("High", 1)]


async def test_option_update_preserves_ids_and_deletes_removed(db_session):
    game = await create_game(db_session)
    service = QuestionService(db_session)
    option_a, option_b = game["option_a"], game["option_b"]

    updated = await service.update_question(
        game["question"].id,
        QuestionUpdate(
            options=[
                OptionIn(id=option_b.id, text="Consolidate locally", points=30, is_correct=True),
                OptionIn(text="Sell the company", points=-5),
            ]
        ),
    )

    by_text = {o.text: o for o in updated.options}
    assert set(by_text) == {"Consolidate locally", "Sell the company"}
    assert by_text["Consolidate locally"].id == option_b.id
    assert by_text["Consolidate locally"].points == 30
    assert by_text["Consolidate locally"].order == 0
    assert by_text["Sell the company"].points == -5

    remaining = await db_session.scalar(
        select(func.count(QuestionOption.id)).where(QuestionOption.id == option_a.id)
    )
    assert remaining == 0


async def test_update_without_options_keeps_them(db_session):
    game = await create_game(db_session)

    updated = await QuestionService(db_session).update_question(
        game["question"].id, QuestionUpdate(title="Growth plan")
    )

    assert updated.title == "Growth plan"
    assert {o.id for o in updated.options} == {game["option_a"].id, game["option_b"].id}


async def test_tag_ids_replace_links(db_session):
    game = await create_game(db_session)
    finance = await taxonomy_service.create_tag(db_session, TagCreate(name="Finance"))
    ops = await taxonomy_service.create_tag(db_session, TagCreate(name="Operations"))
    service = QuestionService(db_session)

    await service.update_question(game["question"].id, QuestionUpdate(tag_ids=[finance.id]))
    updated = await service.update_question(game["question"].id, QuestionUpdate(tag_ids=[ops.id]))

    assert [t.name for t in updated.tags] == ["Operations"]


async def test_soft_delete_hides_from_default_listing(db_session):
    game = await create_game(db_session)
    service = QuestionService(db_session)

    await service.deactivate_question(game["question"].id)

    assert await service.list_questions(game["round"].id) == []
    hidden = await service.list_questions(game["round"].id, include_inactive=True)
    assert [q.id for q in hidden] == [game["question"].id]
    assert (await service.get_question(game["question"].id)).is_active is False


async def test_inactive_category_reads_as_uncategorized(db_session):
    game = await create_game(db_session)
    category = await taxonomy_service.create_category(db_session, CategoryCreate(name="Strategy"))
    service = QuestionService(db_session)
    await service.update_question(game["question"].id, QuestionUpdate(category_id=category.id))

    [before] = await service.describe([await service.get_question(game["question"].id)])
    assert before.category.name == "Strategy"

    await taxonomy_service.deactivate_category(db_session, category.id)
    [after] = await service.describe([await service.get_question(game["question"].id, refresh=True)])
    assert after.category is None


async def test_duplicate_category_name_conflicts(db_session):
    await taxonomy_service.create_category(db_session, CategoryCreate(name="Marketing"))

    with pytest.raises(ConflictError):
        await taxonomy_service.create_category(db_session, CategoryCreate(name="marketing"))


async def test_category_listing_counts_active_questions(db_session):
    game = await create_game(db_session)
    category = await taxonomy_service.create_category(db_session, CategoryCreate(name="Strategy"))
    await QuestionService(db_session).update_question(
        game["question"].id, QuestionUpdate(category_id=category.id)
    )

    [listed] = await taxonomy_service.list_categories(db_session)

    assert listed.name == "Strategy"
    assert listed.color == "#3B82F6"
    assert listed.question_count == 1


async def test_case_file_reference_must_exist(db_session):
    game = await create_game(db_session)
    round_id, question_id = game["round"].id, game["question"].id
    service = QuestionService(db_session)
    bogus = uuid.uuid4()

    with pytest.raises(ValidationError):
        await service.create_question(
            QuestionCreate(round_id=round_id, title="Q", description="D", case_file_id=bogus)
        )
    with pytest.raises(ValidationError):
        await service.update_question(question_id, QuestionUpdate(case_file_id=bogus))

    case_file = await case_file_service.create_case_file(
        db_session,
        CaseFileCreate(
            filename="1_brief.pdf",
            original_name="brief.pdf",
            filepath="/tmp/1_brief.pdf",
            url="/api/v1/files/case-files/1_brief.pdf",
        ),
        uploaded_by=None,
    )
    updated = await service.update_question(question_id, QuestionUpdate(case_file_id=case_file.id))
    assert updated.case_file_id == case_file.id
