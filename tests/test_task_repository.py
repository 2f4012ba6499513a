"""Tests for TaskRepository store operations."""

import pytest
from datetime import datetime, timedelta
import uuid

from taskdesk.models.query import TaskQuery
from taskdesk.models.task import Task, TaskPriority


class TestTaskRepository:
    """Test TaskRepository CRUD operations."""
    
    def test_insert_task(self, task_repository, sample_task, test_user_id):
        created = task_repository.insert(sample_task)
        
        assert created.id == sample_task.id
        assert created.title == sample_task.title
        assert created.owner_id == test_user_id
        assert created.priority == "medium"
    
    def test_get_by_id(self, task_repository, sample_task):
        created = task_repository.insert(sample_task)
        retrieved = task_repository.get_by_id(created.id)
        
        assert retrieved is not None
        assert retrieved.id == created.id
        assert retrieved.description == created.description
    
    def test_get_nonexistent_task(self, task_repository):
        assert task_repository.get_by_id("nonexistent-id") is None

    def test_collections_round_trip(self, task_repository, sample_task_base):
        task = Task(**{
            **sample_task_base,
            "tags": ["b", "a"],
            "attachments": [{"name": "brief", "url": "https://example.com/brief.pdf"}],
            "subtasks": [{"title": "step 1", "completed": True}, {"title": "step 2"}],
        })
        created = task_repository.insert(task)

        assert created.tags == ["b", "a"]
        assert created.attachments[0].url == "https://example.com/brief.pdf"
        assert [s.title for s in created.subtasks] == ["step 1", "step 2"]
        assert created.subtasks[1].completed is False
    
    def test_find_is_scoped_to_owner(self, make_task, task_repository, test_user_id, other_user_id):
        make_task(title="Mine")
        make_task(title="Theirs", owner_id=other_user_id)

        found = task_repository.find(TaskQuery(owner_id=test_user_id))
        assert [t.title for t in found] == ["Mine"]
    
    def test_find_sorted_newest_first_by_default(self, make_task, task_repository, test_user_id):
        now = datetime.utcnow()
        make_task(title="Task 3", created_at=now - timedelta(minutes=2))
        make_task(title="Task 1", created_at=now)
        make_task(title="Task 2", created_at=now - timedelta(minutes=1))

        found = task_repository.find(TaskQuery(owner_id=test_user_id))
        assert [t.title for t in found] == ["Task 1", "Task 2", "Task 3"]

    def test_find_sorts_priority_by_rank(self, make_task, task_repository, test_user_id):
        make_task(title="Low", priority=TaskPriority.LOW)
        make_task(title="High", priority=TaskPriority.HIGH)
        make_task(title="Medium", priority=TaskPriority.MEDIUM)

        ascending = task_repository.find(TaskQuery(owner_id=test_user_id, sort_field="priority", sort_descending=False))
        assert [t.title for t in ascending] == ["Low", "Medium", "High"]

    def test_find_paginates(self, make_task, task_repository, test_user_id):
        now = datetime.utcnow()
        for i in range(5):
            make_task(title=f"Task {i}", created_at=now + timedelta(seconds=i))

        query = TaskQuery(owner_id=test_user_id, sort_descending=False, page=2, page_size=2)
        page = task_repository.find(query)
        assert [t.title for t in page] == ["Task 2", "Task 3"]
        assert task_repository.count(query) == 5

    def test_filters(self, make_task, task_repository, test_user_id):
        make_task(title="Done", completed=True, category="work")
        make_task(title="Open", completed=False, category="work", priority=TaskPriority.HIGH)
        make_task(title="Home", completed=False, category="home")

        assert task_repository.count(TaskQuery(owner_id=test_user_id, completed=True)) == 1
        assert task_repository.count(TaskQuery(owner_id=test_user_id, completed=False)) == 2
        assert task_repository.count(TaskQuery(owner_id=test_user_id, category="work")) == 2
        assert task_repository.count(TaskQuery(owner_id=test_user_id, priority="high")) == 1

    def test_search_matches_title_or_description_case_insensitively(self, make_task, task_repository, test_user_id):
        make_task(title="Buy MILK", description="groceries")
        make_task(title="Call mom", description="about the milk")
        make_task(title="Unrelated", description="nothing")

        found = task_repository.find(TaskQuery(owner_id=test_user_id, search="milk"))
        assert sorted(t.title for t in found) == ["Buy MILK", "Call mom"]

    def test_search_folds_non_ascii_case(self, make_task, task_repository, test_user_id):
        make_task(title="Été planning", description="beach")
        make_task(title="Notes", description="ÜBER wichtig")
        make_task(title="Winter", description="ski")

        query = TaskQuery(owner_id=test_user_id, search="été")
        assert [t.title for t in task_repository.find(query)] == ["Été planning"]
        assert task_repository.count(query) == 1

        found = task_repository.find(TaskQuery(owner_id=test_user_id, search="über"))
        assert [t.title for t in found] == ["Notes"]

    def test_search_treats_wildcards_literally(self, make_task, task_repository, test_user_id):
        make_task(title="100% done", description="x")
        make_task(title="1000 done", description="x")

        found = task_repository.find(TaskQuery(owner_id=test_user_id, search="0%"))
        assert [t.title for t in found] == ["100% done"]
    
    def test_update_by_id(self, task_repository, sample_task):
        created = task_repository.insert(sample_task)

        updated = task_repository.update_by_id(created.id, {"title": "Updated Title", "priority": TaskPriority.HIGH})
        
        assert updated.title == "Updated Title"
        assert updated.priority == "high"
        assert updated.description == created.description
        assert updated.updated_at >= created.updated_at
    
    def test_update_nonexistent_task_returns_none(self, task_repository):
        assert task_repository.update_by_id("nonexistent-id", {"title": "x"}) is None
    
    def test_delete_by_id(self, task_repository, sample_task):
        created = task_repository.insert(sample_task)
        
        assert task_repository.delete_by_id(created.id) is True
        assert task_repository.get_by_id(created.id) is None
    
    def test_delete_nonexistent_task(self, task_repository):
        assert task_repository.delete_by_id("nonexistent-id") is False

    def test_insert_many(self, task_repository, sample_task_base, test_user_id):
        tasks = [Task(**{**sample_task_base, "id": str(uuid.uuid4()), "title": f"Bulk {i}"}) for i in range(3)]

        created = task_repository.insert_many(tasks)
        assert len(created) == 3
        assert task_repository.count(TaskQuery(owner_id=test_user_id)) == 3

    def test_insert_many_empty(self, task_repository):
        assert task_repository.insert_many([]) == []

    def test_overview_for_empty_owner_is_all_zero(self, task_repository, test_user_id):
        overview = task_repository.overview(test_user_id)
        assert overview.model_dump() == {
            "total": 0,
            "completed": 0,
            "pending": 0,
            "high_priority": 0,
            "medium_priority": 0,
            "low_priority": 0,
        }

    def test_count_by_category(self, make_task, task_repository, test_user_id, other_user_id):
        make_task(category="work")
        make_task(category="work")
        make_task(category="home")
        make_task(category="garden", owner_id=other_user_id)

        counts = task_repository.count_by_category(test_user_id)
        assert [(c.category, c.count) for c in counts] == [("work", 2), ("home", 1)]
