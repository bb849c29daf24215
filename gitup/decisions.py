"""
Operator decision providers.

The processor never reads the terminal itself. It asks a Decisions object,
which is either interactive (prompts on stdin) or automatic (answers fixed
up front from command-line flags or configuration).
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional


class Decisions(ABC):
    """Answers the questions asked while processing one repository."""

    @abstractmethod
    def confirm_stash(self, repo_name: str) -> bool:
        """Whether to stash uncommitted changes before proceeding."""
        pass

    @abstractmethod
    def commit_message(self, repo_name: str) -> str:
        """Commit message to use; an empty string requests the default."""
        pass

    @abstractmethod
    def confirm_publish(self, branch: str) -> bool:
        """Whether to push a branch without upstream and track it."""
        pass

    @abstractmethod
    def remote_name(self, default: str) -> str:
        pass


def is_yes(answer: str) -> bool:
    return answer.strip().lower() in ('y', 'yes')


class InteractiveDecisions(Decisions):
    """
    Prompts the operator on the terminal.

    Empty input and end-of-input both count as the default answer, which is
    "no" for the yes/no questions.
    """

    def __init__(self, prompt: Optional[Callable[[str], str]] = None, message: str = ""):
        self.prompt = prompt if prompt is not None else input
        self.message = message

    def _ask(self, question: str) -> str:
        try:
            return self.prompt(question)
        except EOFError:
            return ""

    def confirm_stash(self, repo_name: str) -> bool:
        return is_yes(self._ask("Would you like to stash changes before proceeding? [y/N] "))

    def commit_message(self, repo_name: str) -> str:
        if self.message:
            return self.message
        return self._ask("Enter commit message (leave blank for default message): ").strip()

    def confirm_publish(self, branch: str) -> bool:
        return is_yes(self._ask("Would you like to set upstream and push? [y/N] "))

    def remote_name(self, default: str) -> str:
        answer = self._ask(f"Enter remote name [{default}]: ").strip()
        return answer or default


class AutomaticDecisions(Decisions):
    """Fixed answers for unattended runs."""

    def __init__(self, stash: bool = False, publish: bool = False, message: str = "", remote: Optional[str] = None):
        self.stash = stash
        self.publish = publish
        self.message = message
        self.remote = remote

    def confirm_stash(self, repo_name: str) -> bool:
        return self.stash

    def commit_message(self, repo_name: str) -> str:
        return self.message

    def confirm_publish(self, branch: str) -> bool:
        return self.publish

    def remote_name(self, default: str) -> str:
        return self.remote or default
