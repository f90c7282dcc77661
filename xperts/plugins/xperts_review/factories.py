"""Submission factories.

Submissions are created straight in the requested state, without going through the assignment engine.
"""

import factory

from xperts.xperts_profile.factories import AccountFactory

from .models import Submission


class SubmissionFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Submission

    contributor = factory.SubFactory(AccountFactory)
    kind = Submission.Kinds.SIMPLE
    state = factory.LazyAttribute(lambda obj: Submission.initial_state(obj.kind))
    title = factory.Faker("sentence", nb_words=6)
    domain = factory.Faker("random_element", elements=["Backend", "Frontend", "Data", "DevOps"])
    language = factory.Faker("random_element", elements=["Python", "Go", "TypeScript"])
    difficulty = factory.Faker("random_element", elements=["Easy", "Medium", "Hard"])
    description = factory.Faker("paragraph", nb_sentences=3)
    file_url = factory.Sequence(lambda n: f"https://files.example.org/submission-{n}.zip")


class ExtendedSubmissionFactory(SubmissionFactory):
    kind = Submission.Kinds.EXTENDED
    github_repo = "https://github.com/xperts/sample-task"
    commit_hash = factory.Faker("sha1")
    test_patch_url = factory.Sequence(lambda n: f"https://files.example.org/test-{n}.patch")
    dockerfile_url = factory.Sequence(lambda n: f"https://files.example.org/Dockerfile-{n}")
    solution_patch_url = factory.Sequence(lambda n: f"https://files.example.org/solution-{n}.patch")
