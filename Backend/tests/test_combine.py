"""
Recombination tests: preview and save through POST /api/prompts/combine.
"""
import pytest

from promptshelf.core.exceptions import PromptNotFoundError, ValidationFailedError
from promptshelf.models import CombineRequest, Prompt
from promptshelf.services import prompts as prompt_service

from conftest import ALICE, BOB, auth


@pytest.fixture
async def trio(make_prompt):
    """One prompt per slot, owned by Alice."""
    character = await make_prompt(ALICE, title="Knight", prompt="armored knight", type="Character")
    background = await make_prompt(ALICE, title="Castle", prompt="ruined castle at dusk", type="Background")
    pose = await make_prompt(ALICE, title="Kneel", prompt="kneeling, head bowed", type="Pose")
    return character, background, pose


@pytest.mark.asyncio
async def test_combine_joins_in_slot_order(trio):
    character, background, pose = trio
    # Supplied out of order on purpose; output follows Character, Background, Pose
    request = CombineRequest(pose_id=str(pose.id), character_id=str(character.id), background_id=str(background.id))

    combined = await prompt_service.combine_prompts(ALICE, request)

    assert combined.prompt == "armored knight, ruined castle at dusk, kneeling, head bowed"
    assert combined.title == "Combined: Knight + Castle + Kneel"
    assert combined.type == "Combined"
    assert combined.source_ids == [str(character.id), str(background.id), str(pose.id)]


@pytest.mark.asyncio
async def test_combine_partial_selection_uses_slot_placeholders(trio):
    _, background, _ = trio

    combined = await prompt_service.combine_prompts(ALICE, CombineRequest(background_id=str(background.id)))

    assert combined.prompt == "ruined castle at dusk"
    assert combined.title == "Combined: Character + Castle + Pose"


@pytest.mark.asyncio
async def test_combine_requires_a_selection(db):
    with pytest.raises(ValidationFailedError):
        await prompt_service.combine_prompts(ALICE, CombineRequest())


@pytest.mark.asyncio
async def test_combine_rejects_wrong_slot_type(trio):
    character, _, _ = trio
    with pytest.raises(ValidationFailedError) as exc_info:
        await prompt_service.combine_prompts(ALICE, CombineRequest(pose_id=str(character.id)))
    assert "not a Pose prompt" in exc_info.value.message


@pytest.mark.asyncio
async def test_combine_cannot_read_foreign_prompts(trio):
    character, _, _ = trio
    with pytest.raises(PromptNotFoundError):
        await prompt_service.combine_prompts(BOB, CombineRequest(character_id=str(character.id)))


@pytest.mark.asyncio
async def test_combined_title_is_truncated(make_prompt):
    character = await make_prompt(ALICE, title="C" * 100, type="Character")
    pose = await make_prompt(ALICE, title="P" * 100, type="Pose")

    combined = await prompt_service.combine_prompts(
        ALICE, CombineRequest(character_id=str(character.id), pose_id=str(pose.id))
    )
    assert len(combined.title) <= 100
    assert combined.title.startswith("Combined: CCC")


@pytest.mark.asyncio
async def test_save_combined_bypasses_type_enum(trio):
    character, _, pose = trio

    saved = await prompt_service.save_combined(
        ALICE, CombineRequest(character_id=str(character.id), pose_id=str(pose.id), tags=[" mix "])
    )

    stored = await Prompt.get(saved.id)
    assert stored.type == "Combined"
    assert stored.owner_id == ALICE
    assert stored.tags == ["mix"]
    assert stored.prompt == "armored knight, kneeling, head bowed"
    assert await prompt_service.distinct_types(ALICE) == ["Background", "Character", "Combined", "Pose"]


@pytest.mark.asyncio
async def test_save_combined_keeps_edited_text(trio):
    character, background, _ = trio

    saved = await prompt_service.save_combined(
        ALICE,
        CombineRequest(
            character_id=str(character.id),
            background_id=str(background.id),
            prompt="  armored knight in the rain, ruined castle  ",
        ),
    )

    stored = await Prompt.get(saved.id)
    assert stored.prompt == "armored knight in the rain, ruined castle"
    assert stored.title == "Combined: Knight + Castle + Pose"


@pytest.mark.asyncio
async def test_save_combined_default_tags(trio):
    character, _, _ = trio

    saved = await prompt_service.save_combined(ALICE, CombineRequest(character_id=str(character.id)))

    stored = await Prompt.get(saved.id)
    assert stored.tags == ["combined", "generated"]
    assert stored.prompt == "armored knight"


def test_blank_edited_text_is_rejected():
    with pytest.raises(ValueError):
        CombineRequest(character_id="507f1f77bcf86cd799439011", prompt="   ")


@pytest.mark.asyncio
async def test_slot_accepts_prompt_tagged_with_slot_name(make_prompt):
    # Typed Character but tagged for the pose slot
    crouch = await make_prompt(ALICE, title="Crouch", prompt="crouching low", type="Character", tags=["pose-ref"])

    combined = await prompt_service.combine_prompts(ALICE, CombineRequest(pose_id=str(crouch.id)))

    assert combined.prompt == "crouching low"
    assert combined.title == "Combined: Character + Background + Crouch"


# ═══════════════════════════════════════════════════════
# HTTP
# ═══════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_combine_preview_endpoint(client, trio):
    character, background, _ = trio

    response = await client.post(
        "/api/prompts/combine",
        json={"characterId": str(character.id), "backgroundId": str(background.id)},
        headers=auth(),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["prompt"] == "armored knight, ruined castle at dusk"
    assert data["type"] == "Combined"
    assert await Prompt.find_all().count() == 3


@pytest.mark.asyncio
async def test_combine_save_endpoint(client, trio):
    character, _, _ = trio

    response = await client.post(
        "/api/prompts/combine",
        json={"characterId": str(character.id), "save": True},
        headers=auth(),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["type"] == "Combined"
    assert data["title"] == "Combined: Knight + Background + Pose"

    listed = (await client.get("/api/prompts", params={"types": "Combined"}, headers=auth())).json()
    assert [item["id"] for item in listed["data"]] == [data["id"]]


@pytest.mark.asyncio
async def test_combine_endpoint_errors(client, trio):
    empty = await client.post("/api/prompts/combine", json={}, headers=auth())
    assert empty.status_code == 400
    assert empty.json()["error"] == "Select at least one prompt to combine"

    foreign = await client.post(
        "/api/prompts/combine", json={"characterId": str(trio[0].id)}, headers=auth(BOB)
    )
    assert foreign.status_code == 404

    blank = await client.post(
        "/api/prompts/combine",
        json={"characterId": str(trio[0].id), "prompt": " ", "save": True},
        headers=auth(),
    )
    assert blank.status_code == 400
    assert blank.json()["error"] == "Prompt cannot be empty"


@pytest.mark.asyncio
async def test_combine_save_endpoint_with_edited_text(client, trio):
    character, _, pose = trio

    response = await client.post(
        "/api/prompts/combine",
        json={
            "characterId": str(character.id),
            "poseId": str(pose.id),
            "prompt": "armored knight kneeling in snow",
            "save": True,
        },
        headers=auth(),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["prompt"] == "armored knight kneeling in snow"
    assert data["tags"] == ["combined", "generated"]
