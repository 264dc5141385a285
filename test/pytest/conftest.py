# test/pytest/conftest.py
import pytest
from datetime import datetime, timezone

from app.schemas.assignment import Atribuicao, AtribuicaoStatus
from app.schemas.content import Folder, StudyList, Flashcard
from app.schemas.context import UserContext
from app.schemas.turma import Turma, TurmaMembro


# ------------------------- Fake repositories -------------------------
class FakeContentRepo:
    def __init__(self):
        self.folders: dict[str, Folder] = {}
        self.lists: dict[str, StudyList] = {}
        self.cards: dict[str, Flashcard] = {}
        # iniezione di guasti
        self.fail_folder_insert = False
        self.fail_list_insert_titles: set[str] = set()
        self.fail_card_terms: set[str] = set()
        self.fail_delete_flashcards_for: set[str] = set()

    async def find_folder(self, folder_id):
        return self.folders.get(folder_id)

    async def find_list(self, list_id):
        return self.lists.get(list_id)

    async def find_lists_in_folder(self, folder_id):
        found = [l for l in self.lists.values() if l.folder_id == folder_id]
        return sorted(found, key=lambda l: l.order_index)

    async def find_flashcards(self, list_id):
        return [c for c in self.cards.values() if c.list_id == list_id]

    async def count_flashcards(self, list_ids):
        return sum(1 for c in self.cards.values() if c.list_id in set(list_ids))

    async def create_folder(self, folder):
        if self.fail_folder_insert:
            raise RuntimeError("folders insert failed")
        self.folders[folder.id] = folder
        return folder.id

    async def create_list(self, study_list):
        if study_list.title in self.fail_list_insert_titles:
            raise RuntimeError("lists insert failed")
        self.lists[study_list.id] = study_list
        return study_list.id

    async def create_flashcard(self, card):
        if card.term in self.fail_card_terms:
            raise RuntimeError("flashcards insert failed")
        self.cards[card.id] = card
        return card.id

    async def delete_flashcards(self, list_id):
        if list_id in self.fail_delete_flashcards_for:
            raise RuntimeError("flashcards delete failed")
        doomed = [cid for cid, c in self.cards.items() if c.list_id == list_id]
        for cid in doomed:
            del self.cards[cid]
        return len(doomed)

    async def delete_list(self, list_id, class_id):
        l = self.lists.get(list_id)
        if l is None or l.class_id != class_id:
            return False
        del self.lists[list_id]
        return True

    async def delete_folder(self, folder_id, class_id):
        f = self.folders.get(folder_id)
        if f is None or f.class_id != class_id:
            return False
        del self.folders[folder_id]
        return True


class FakeRosterRepo:
    def __init__(self):
        self.turmas: dict[str, Turma] = {}
        self.membros: list[TurmaMembro] = []

    async def find_turma(self, turma_id):
        return self.turmas.get(turma_id)

    async def active_members(self, turma_id):
        return [m for m in self.membros if m.turma_id == turma_id and m.ativo]

    async def is_active_member(self, turma_id, user_id):
        return any(m.turma_id == turma_id and m.user_id == user_id and m.ativo for m in self.membros)

    async def count_active_members(self, turma_id):
        return len(await self.active_members(turma_id))


class FakeAssignmentRepo:
    def __init__(self):
        self.items: dict[str, Atribuicao] = {}
        self.statuses: dict[tuple[str, str], AtribuicaoStatus] = {}
        self.fail_create = False
        self.fail_delete = False

    async def create(self, atribuicao):
        if self.fail_create:
            raise RuntimeError("atribuicoes insert failed")
        if not atribuicao.id:
            raise ValueError("id must be set by the service")
        self.items[atribuicao.id] = atribuicao.model_copy(
            update={"created_at": datetime.now(timezone.utc)}
        )
        return atribuicao.id

    async def find_one(self, atribuicao_id):
        return self.items.get(atribuicao_id)

    async def find_for_turma(self, turma_id):
        return [a for a in self.items.values() if a.turma_id == turma_id]

    async def find_many(self, atribuicao_ids):
        return [self.items[i] for i in atribuicao_ids if i in self.items]

    async def delete(self, atribuicao_id):
        if self.fail_delete:
            raise RuntimeError("atribuicoes delete failed")
        return self.items.pop(atribuicao_id, None) is not None

    async def create_statuses(self, statuses):
        for s in statuses:
            key = (s.atribuicao_id, s.aluno_id)
            if key in self.statuses:
                raise ValueError("duplicate status")
            self.statuses[key] = s
        return len(statuses)

    async def find_statuses(self, atribuicao_id):
        return [s for (aid, _), s in self.statuses.items() if aid == atribuicao_id]

    async def find_statuses_for_student(self, aluno_id):
        return [s for (_, uid), s in self.statuses.items() if uid == aluno_id]

    async def upsert_status(self, status):
        saved = status.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        self.statuses[(status.atribuicao_id, status.aluno_id)] = saved
        return saved

    async def delete_statuses(self, atribuicao_id):
        doomed = [k for k in self.statuses if k[0] == atribuicao_id]
        for k in doomed:
            del self.statuses[k]
        return len(doomed)


class FakePublisher:
    enabled = False

    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    async def publish_assignment_created(self, atribuicao_id, turma_id, teacher_id, alunos):
        self.events.append(("assignment.created", {"atribuicao_id": atribuicao_id, "alunos": alunos}))

    async def publish_assignment_deleted(self, atribuicao_id, teacher_id):
        self.events.append(("assignment.deleted", {"atribuicao_id": atribuicao_id}))

    async def publish_assignment_completed(self, atribuicao_id, aluno_id, pontos_vale):
        self.events.append(("assignment.completed", {"aluno_id": aluno_id, "pontos_vale": pontos_vale}))


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def content():
    return FakeContentRepo()

@pytest.fixture
def roster():
    r = FakeRosterRepo()
    r.turmas["g"] = Turma(id="g", owner_teacher_id="t1", nome="Inglês 1")
    r.turmas["h"] = Turma(id="h", owner_teacher_id="t2", nome="Inglês 2")
    for uid in ("s1", "s2", "s3"):
        r.membros.append(TurmaMembro(turma_id="g", user_id=uid))
    r.membros.append(TurmaMembro(turma_id="g", user_id="s4", ativo=False))
    return r

@pytest.fixture
def repo():
    return FakeAssignmentRepo()

@pytest.fixture
def publisher():
    return FakePublisher()

@pytest.fixture
def teacher():
    return UserContext(user_id="t1", role="teacher")

@pytest.fixture
def other_teacher():
    return UserContext(user_id="t2", role="teacher")

@pytest.fixture
def student():
    return UserContext(user_id="s1", role="student")

@pytest.fixture
def folder_f(content):
    """Pasta F di t1 con la lista L1 (3 flashcard)."""
    content.folders["F"] = Folder(id="F", owner_id="t1", title="Animals", description="Bichos")
    content.lists["L1"] = StudyList(id="L1", folder_id="F", owner_id="t1", title="Farm", lang="en")
    for i, (term, tr) in enumerate([("cow", "vaca"), ("horse", "cavalo"), ("pig", "porco")]):
        content.cards[f"c{i}"] = Flashcard(
            id=f"c{i}", list_id="L1", user_id="t1", term=term, translation=tr,
            hint=f"hint {term}", accepted_answers_pt=[tr],
        )
    return content.folders["F"]
