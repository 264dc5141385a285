import pytest

from app.schemas.assignment import Atribuicao, AtribuicaoStatus
from app.services.cascade import CascadeDeleter
from app.services.duplicator import ContentDuplicator
from app.services.errors import DeleteFailed


async def _assign(repo, content, fonte_tipo, source_id, aid="a1"):
    if fonte_tipo == "pasta":
        copy = await ContentDuplicator.duplicate_folder(source_id, "g", "t1", content)
    else:
        copy = await ContentDuplicator.duplicate_list(source_id, "g", "t1", content)
    await repo.create(Atribuicao(id=aid, turma_id="g", titulo="T", fonte_tipo=fonte_tipo, fonte_id=copy.root_id))
    await repo.create_statuses([AtribuicaoStatus(atribuicao_id=aid, aluno_id=u) for u in ("s1", "s2")])
    return copy.root_id


@pytest.mark.asyncio
async def test_partially_vanished_copy_is_still_deleted(roster, content, repo, folder_f):
    copy_id = await _assign(repo, content, "lista", "L1")
    # la riga della lista copiata è già sparita, restano le flashcard orfane
    del content.lists[copy_id]
    assert len(await content.find_flashcards(copy_id)) == 3

    report = await CascadeDeleter.delete_assignment("a1", "t1", roster, content, repo)

    assert report.existed
    assert report.warnings == []
    assert await content.find_flashcards(copy_id) == []
    assert repo.items == {}
    assert set(content.lists) == {"L1"}
    assert len(content.cards) == 3


@pytest.mark.asyncio
async def test_vanished_folder_row_still_removes_its_lists(roster, content, repo, folder_f):
    copy_id = await _assign(repo, content, "pasta", "F")
    [l_copy] = await content.find_lists_in_folder(copy_id)
    del content.folders[copy_id]

    report = await CascadeDeleter.delete_assignment("a1", "t1", roster, content, repo)

    assert report.warnings == []
    assert l_copy.id not in content.lists
    assert await content.find_flashcards(l_copy.id) == []
    assert set(content.folders) == {"F"}
    assert set(content.lists) == {"L1"}
    assert len(content.cards) == 3


@pytest.mark.asyncio
async def test_fully_vanished_copy(roster, content, repo, folder_f):
    copy_id = await _assign(repo, content, "lista", "L1")
    await content.delete_flashcards(copy_id)
    await content.delete_list(copy_id, "g")

    report = await CascadeDeleter.delete_assignment("a1", "t1", roster, content, repo)
    assert report.warnings == []
    assert repo.items == {}


@pytest.mark.asyncio
async def test_leaf_failure_does_not_stop_cascade(roster, content, repo, folder_f):
    copy_id = await _assign(repo, content, "lista", "L1")
    content.fail_delete_flashcards_for.add(copy_id)

    report = await CascadeDeleter.delete_assignment("a1", "t1", roster, content, repo)

    assert [(w.kind, w.entity) for w in report.warnings] == [("delete", "flashcards")]
    assert copy_id not in content.lists
    assert repo.items == {}
    assert repo.statuses == {}


@pytest.mark.asyncio
async def test_original_content_is_never_deleted(roster, content, repo, folder_f):
    # atribuicao che punta direttamente all'originale
    await repo.create(Atribuicao(id="legacy", turma_id="g", titulo="T", fonte_tipo="pasta", fonte_id="F"))

    report = await CascadeDeleter.delete_assignment("legacy", "t1", roster, content, repo)

    assert report.existed
    assert [w.entity_id for w in report.warnings] == ["F"]
    assert "F" in content.folders
    assert "L1" in content.lists
    assert len(content.cards) == 3
    assert "legacy" not in repo.items


@pytest.mark.asyncio
async def test_copy_of_another_turma_is_not_deleted(roster, content, repo, folder_f):
    other = await ContentDuplicator.duplicate_list("L1", "h", "t1", content)
    await repo.create(Atribuicao(id="a2", turma_id="g", titulo="T", fonte_tipo="lista", fonte_id=other.root_id))

    await CascadeDeleter.delete_assignment("a2", "t1", roster, content, repo)

    assert other.root_id in content.lists
    assert len(await content.find_flashcards(other.root_id)) == 3


@pytest.mark.asyncio
async def test_final_delete_failure_surfaces(roster, content, repo, folder_f):
    copy_id = await _assign(repo, content, "lista", "L1")
    repo.fail_delete = True

    with pytest.raises(DeleteFailed):
        await CascadeDeleter.delete_assignment("a1", "t1", roster, content, repo)

    # già svuotata, la riga resta
    assert "a1" in repo.items
    assert copy_id not in content.lists
    assert repo.statuses == {}

    repo.fail_delete = False
    report = await CascadeDeleter.delete_assignment("a1", "t1", roster, content, repo)
    assert report.existed
    assert repo.items == {}
