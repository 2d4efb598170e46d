#!/usr/bin/env python3
"""
Unit тесты для archive_terminal_tool.py
"""

import asyncio
import logging

import pytest
from unittest.mock import AsyncMock

from cold_case_mcp.assistant import AnthropicAssistant, AssistantRequest
from cold_case_mcp.content.case_99_042 import COORDINATES_PREVIEW, COORDINATES_SECRET, README
from cold_case_mcp.models.archive import DirectoryNode, EncryptedNode
from cold_case_mcp.tools.archive_terminal_tool import ArchiveTerminalTool
from cold_case_mcp.tools.utils.constants import DATE_PLACEHOLDER, LOCKED_SECTION_MARKER
from cold_case_mcp.utils.path_utils import resolve_node
from cold_case_mcp.utils.session_manager import create_session


def kinds(entries):
    return [entry.kind for entry in entries]


def contents(entries):
    return [entry.content for entry in entries]


def coordinates(session):
    return session.archive.children["encrypted"].children["coordinates.enc"]


class TestArchiveTerminalTool:
    """Тесты для ArchiveTerminalTool"""

    @pytest.fixture
    def assistant(self):
        """Создает mock ассистента"""
        mock = AsyncMock()
        mock.answer.return_value = "  Maya was born in July.  \n"
        return mock

    @pytest.fixture
    def terminal(self, assistant):
        """Создает экземпляр ArchiveTerminalTool без задержки расшифровки"""
        return ArchiveTerminalTool(assistant=assistant, decrypt_delay=0)

    @pytest.fixture
    def session(self):
        """Создает новую сессию"""
        return create_session()

    async def run(self, terminal, session, *lines):
        entries = []
        for line in lines:
            entries = await terminal.run_command(session, line)
        return entries

    # --- Dispatch ---

    @pytest.mark.asyncio
    async def test_blank_line_is_ignored(self, terminal, session):
        before = list(session.transcript)
        assert await terminal.run_command(session, "   ") == []
        assert session.transcript == before

    @pytest.mark.asyncio
    async def test_every_command_is_echoed_first(self, terminal, session):
        """Тест: каждая команда сначала попадает в журнал"""
        for line in ["ls", "help", "cd nowhere", "dance", "open readme"]:
            entries = await terminal.run_command(session, f"  {line} ")
            assert entries[0].kind == "command"
            assert entries[0].content == f"> {line}"
            assert session.transcript[-len(entries):] == entries

    @pytest.mark.asyncio
    async def test_unknown_command(self, terminal, session):
        entries = await terminal.run_command(session, "dance now")
        assert kinds(entries) == ["command", "error"]
        assert entries[1].content == "Invalid command: dance"

    @pytest.mark.asyncio
    async def test_verb_is_case_insensitive(self, terminal, session):
        entries = await terminal.run_command(session, "LS")
        assert "error" not in kinds(entries)

    @pytest.mark.asyncio
    async def test_dangling_path_is_reported(self, terminal, session):
        session.current_path = ["gone"]
        entries = await terminal.run_command(session, "ls")
        assert contents(entries)[1:] == ["System error: path lost."]

    # --- help ---

    @pytest.mark.asyncio
    async def test_general_help(self, terminal, session):
        entries = await terminal.run_command(session, "help")
        assert entries[1].kind == "system"
        assert entries[1].content == "Available commands:"
        assert all(entry.kind == "info" for entry in entries[2:])

    @pytest.mark.asyncio
    async def test_help_topic_accepts_aliases(self, terminal, session):
        """Тест справки по псевдониму команды"""
        entries = await terminal.run_command(session, "help CAT")
        assert entries[1].kind == "system"
        assert entries[1].content == "Command: open [file]"

    @pytest.mark.asyncio
    async def test_help_unknown_topic(self, terminal, session):
        entries = await terminal.run_command(session, "help teleport")
        assert kinds(entries) == ["command", "error"]

    # --- ls ---

    @pytest.mark.asyncio
    async def test_ls_lists_root_in_insertion_order(self, terminal, session):
        """Тест вывода содержимого каталога"""
        entries = await terminal.run_command(session, "ls")
        assert entries[1].kind == "system"
        rows = entries[2:]
        assert [entry.listing.name for entry in rows] == ["README.txt", "evidence", "interviews", "encrypted", "notes"]
        assert kinds(rows) == ["info", "success", "success", "success", "success"]
        assert rows[0].listing.date == "1999-01-01"
        assert rows[0].listing.type_tag == "<TXT>"
        assert rows[1].listing.date == DATE_PLACEHOLDER
        assert rows[1].listing.type_tag == "<DIR>"
        assert "README.txt" in rows[0].content

    @pytest.mark.asyncio
    async def test_ls_aliases_and_encrypted_tag(self, terminal, session):
        await terminal.run_command(session, "cd encrypted")
        for verb in ["dir", "ll"]:
            entries = await terminal.run_command(session, verb)
            assert entries[-1].listing.type_tag == "<ENC>"
            assert entries[-1].listing.name == "coordinates.enc"

    @pytest.mark.asyncio
    async def test_ls_empty_directory(self, terminal):
        archive = DirectoryNode.of(
            "",
            DirectoryNode.of("empty"),
            EncryptedNode(name="v.enc", locked_preview_text="p", password="1", secret_body="s", is_win_condition=True),
        )
        session = create_session(archive)
        entries = await self.run(terminal, session, "cd empty", "ls")
        assert kinds(entries) == ["command", "info"]
        assert entries[1].content == "(directory is empty)"

    # --- cd ---

    @pytest.mark.asyncio
    async def test_cd_into_directory_uses_stored_name(self, terminal, session):
        entries = await terminal.run_command(session, "cd EVIDENCE")
        assert kinds(entries) == ["command"]
        assert session.current_path == ["evidence"]

    @pytest.mark.asyncio
    async def test_cd_up_and_to_root(self, terminal, session):
        await terminal.run_command(session, "cd evidence")
        await terminal.run_command(session, "cd ..")
        assert session.current_path == []
        await terminal.run_command(session, "cd notes")
        await terminal.run_command(session, "cd /")
        assert session.current_path == []

    @pytest.mark.asyncio
    async def test_cd_up_at_root_is_an_error(self, terminal, session):
        """Тест: cd .. в корне не меняет путь"""
        entries = await terminal.run_command(session, "cd ..")
        assert kinds(entries) == ["command", "error"]
        assert session.current_path == []

    @pytest.mark.asyncio
    async def test_cd_missing_without_hint(self, terminal, session):
        entries = await terminal.run_command(session, "cd attic")
        assert kinds(entries) == ["command", "error"]
        assert entries[1].content == "Directory not found: attic"

    @pytest.mark.asyncio
    async def test_cd_missing_with_tree_wide_hint(self, terminal, session):
        """Тест подсказки при поиске по всему дереву"""
        await terminal.run_command(session, "cd evidence")
        entries = await terminal.run_command(session, "cd notes")
        assert kinds(entries) == ["command", "error", "system"]
        assert "'notes'" in entries[2].content
        assert session.current_path == ["evidence"]

    @pytest.mark.asyncio
    async def test_cd_onto_a_file(self, terminal, session):
        entries = await terminal.run_command(session, "cd README.txt")
        assert kinds(entries) == ["command", "error", "system"]
        assert entries[1].content == "Not a directory: README.txt"
        assert session.current_path == []

    @pytest.mark.asyncio
    async def test_cd_without_argument(self, terminal, session):
        entries = await terminal.run_command(session, "cd")
        assert contents(entries)[1:] == ["Usage: cd [directory]"]

    @pytest.mark.asyncio
    async def test_path_always_resolves_to_a_directory(self, terminal, session):
        """Тест целостности текущего пути"""
        lines = [
            "cd ..", "cd evidence", "cd police_report", "cd ..", "cd ..", "cd encrypted",
            "cd coordinates.enc", "cd /", "cd README", "cd notes", "cd ../interviews", "cd Interviews",
        ]
        for line in lines:
            await terminal.run_command(session, line)
            assert isinstance(resolve_node(session.archive, session.current_path), DirectoryNode)

    # --- open ---

    @pytest.mark.asyncio
    async def test_open_text_without_extension(self, terminal, session):
        entries = await terminal.run_command(session, "cat readme")
        assert kinds(entries) == ["command", "success", "info"]
        assert entries[1].content == "Opening file: README.txt..."
        assert entries[2].content == README

    @pytest.mark.asyncio
    async def test_open_only_looks_in_current_directory(self, terminal, session):
        """Тест: файл в другом каталоге не открывается, но есть подсказка"""
        entries = await terminal.run_command(session, "open police_report")
        assert kinds(entries) == ["command", "error", "system"]
        assert entries[1].content == "File not found: police_report"
        assert "/evidence/police_report.txt" in entries[2].content

    @pytest.mark.asyncio
    async def test_open_missing_everywhere_is_silent_about_hints(self, terminal, session):
        entries = await terminal.run_command(session, "open confession")
        assert kinds(entries) == ["command", "error"]

    @pytest.mark.asyncio
    async def test_open_directory(self, terminal, session):
        entries = await terminal.run_command(session, "open evidence")
        assert kinds(entries) == ["command", "error"]
        assert "cd" in entries[1].content

    @pytest.mark.asyncio
    async def test_open_without_argument(self, terminal, session):
        entries = await terminal.run_command(session, "view")
        assert contents(entries)[1:] == ["Usage: open [file]"]

    # --- Scenario: the case ---

    @pytest.mark.asyncio
    async def test_open_locked_record(self, terminal, session):
        """Сценарий: открыть закрытый файл"""
        entries = await self.run(terminal, session, "cd encrypted", "open coordinates")
        assert kinds(entries) == ["command", "error", "info", "system"]
        assert entries[2].content == COORDINATES_PREVIEW
        assert "decrypt coordinates.enc" in entries[3].content
        assert session.solved is False

    @pytest.mark.asyncio
    async def test_decrypt_with_correct_password(self, terminal, session):
        """Сценарий: расшифровка верным паролем"""
        entries = await self.run(terminal, session, "cd encrypted", "decrypt coordinates 071495")
        assert kinds(entries) == ["command", "system", "success", "success"]
        assert entries[1].content == "Decrypting..."
        assert entries[2].content == "Access granted."
        assert coordinates(session).is_locked is False
        assert session.busy is False

    @pytest.mark.asyncio
    async def test_open_unlocked_record_solves_the_case(self, terminal, session):
        """Сценарий: открыть расшифрованный файл и очистить экран"""
        entries = await self.run(terminal, session, "cd encrypted", "unlock coordinates 071495", "open coordinates")
        assert kinds(entries) == ["command", "success", "info"]
        assert entries[2].content == COORDINATES_SECRET
        assert session.solved is True

        assert await terminal.run_command(session, "clear") == []
        assert session.transcript == []
        assert session.solved is True

    @pytest.mark.asyncio
    async def test_decrypt_with_wrong_password(self, terminal, session):
        """Сценарий: неверный пароль"""
        entries = await self.run(terminal, session, "cd encrypted", "decrypt coordinates 000000")
        assert kinds(entries) == ["command", "error"]
        assert entries[1].content == "Access denied: wrong password."
        assert coordinates(session).is_locked is True

    @pytest.mark.asyncio
    async def test_decrypt_after_success_is_a_no_op(self, terminal, session):
        """Тест идемпотентности decrypt"""
        await self.run(terminal, session, "cd encrypted", "decrypt coordinates 071495")
        for password in ["000000", "071495"]:
            entries = await terminal.run_command(session, f"decrypt coordinates {password}")
            assert kinds(entries) == ["command", "info"]
            assert entries[1].content == "coordinates.enc is already unlocked."
            assert coordinates(session).is_locked is False

    @pytest.mark.asyncio
    async def test_decrypt_requires_two_arguments(self, terminal, session):
        await terminal.run_command(session, "cd encrypted")
        entries = await terminal.run_command(session, "decrypt coordinates")
        assert contents(entries)[1:] == ["Usage: decrypt [file] [password]"]

    @pytest.mark.asyncio
    async def test_decrypt_plain_file(self, terminal, session):
        entries = await terminal.run_command(session, "decrypt readme 1234")
        assert contents(entries)[1:] == ["README.txt is not an encrypted file."]

    @pytest.mark.asyncio
    async def test_decrypt_missing_file(self, terminal, session):
        """Тест: decrypt ищет только в текущем каталоге"""
        entries = await terminal.run_command(session, "decrypt coordinates 071495")
        assert kinds(entries) == ["command", "error"]
        assert coordinates(session).is_locked is True

    @pytest.mark.asyncio
    async def test_decrypt_marks_session_busy_during_delay(self, assistant, session):
        """Тест состояния busy во время задержки расшифровки"""
        terminal = ArchiveTerminalTool(assistant=assistant, decrypt_delay=0.2)
        await terminal.run_command(session, "cd encrypted")
        task = asyncio.create_task(terminal.run_command(session, "decrypt coordinates 071495"))
        await asyncio.sleep(0)
        assert session.busy is True
        assert session.awaiting_assistant is False
        assert coordinates(session).is_locked is True
        await task
        assert session.busy is False
        assert coordinates(session).is_locked is False

    @pytest.mark.asyncio
    async def test_lock_and_solved_are_monotonic(self, terminal, session):
        """Тест монотонности is_locked и solved"""
        await self.run(terminal, session, "cd encrypted", "decrypt coordinates 071495", "open coordinates")
        for line in [
            "decrypt coordinates 000000", "clear", "cd /", "search 8821", "help", "open readme",
            "cd encrypted", "decrypt coordinates 071495", "open coordinates", "clear", "bogus",
        ]:
            await terminal.run_command(session, line)
            assert coordinates(session).is_locked is False
            assert session.solved is True

    @pytest.mark.asyncio
    async def test_opening_other_records_does_not_solve(self, terminal):
        archive = DirectoryNode.of(
            "",
            EncryptedNode(name="decoy.enc", locked_preview_text="p", password="1", secret_body="decoy"),
            EncryptedNode(name="real.enc", locked_preview_text="p", password="2", secret_body="real", is_win_condition=True),
        )
        session = create_session(archive)
        await self.run(terminal, session, "decrypt decoy 1", "open decoy")
        assert session.solved is False
        await self.run(terminal, session, "decrypt real 2", "open real")
        assert session.solved is True

    # --- search ---

    @pytest.mark.asyncio
    async def test_search_maya(self, terminal, session):
        """Сценарий: поиск 'Maya' из корня"""
        entries = await terminal.run_command(session, "search Maya")
        assert kinds(entries) == ["command", "system", "success", "success", "success"]
        assert contents(entries)[2:] == [
            "[CONTENT MATCH] evidence/witness_stmt.txt",
            "[CONTENT MATCH] evidence/photo_log.txt",
            "[CONTENT MATCH] notes/miller_diary.txt",
        ]

    @pytest.mark.asyncio
    async def test_search_covers_whole_tree_from_any_directory(self, terminal, session):
        await terminal.run_command(session, "cd interviews")
        entries = await terminal.run_command(session, "grep Maya")
        assert len(entries) == 5

    @pytest.mark.asyncio
    async def test_search_joins_keywords(self, terminal, session):
        entries = await terminal.run_command(session, "find little angel")
        assert entries[1].content == 'Searching database: "little angel"...'
        assert contents(entries)[2:] == ["[CONTENT MATCH] interviews/transcript_01.txt"]

    @pytest.mark.asyncio
    async def test_search_without_results(self, terminal, session):
        entries = await terminal.run_command(session, "search zeppelin")
        assert kinds(entries) == ["command", "system", "info"]
        assert entries[2].content == "No matches found."

    @pytest.mark.asyncio
    async def test_search_gating_before_and_after_unlock(self, terminal, session):
        """Тест: закрытое содержимое не ищется до расшифровки"""
        entries = await terminal.run_command(session, "search 8821")
        assert kinds(entries)[2:] == ["info"]
        await self.run(terminal, session, "cd encrypted", "decrypt coordinates 071495")
        entries = await terminal.run_command(session, "search 8821")
        assert contents(entries)[2:] == ["[CONTENT MATCH] encrypted/coordinates.enc"]

    @pytest.mark.asyncio
    async def test_search_without_argument(self, terminal, session):
        entries = await terminal.run_command(session, "search")
        assert contents(entries)[1:] == ["Usage: search [keyword]"]

    # --- ask ---

    @pytest.mark.asyncio
    async def test_ask_sends_question_with_fresh_context(self, terminal, session, assistant):
        """Тест вызова ассистента"""
        entries = await terminal.run_command(session, "ask who is   Maya?")
        assert kinds(entries) == ["command", "assistant"]
        assert entries[1].content == "[AI ANALYSIS]:\nMaya was born in July."

        assistant.answer.assert_awaited_once()
        request = assistant.answer.await_args.args[0]
        assert isinstance(request, AssistantRequest)
        assert request.question == "who is Maya?"
        assert "--- DATABASE START ---" in request.system_instruction
        assert LOCKED_SECTION_MARKER in request.system_instruction
        assert coordinates(session).secret_body not in request.system_instruction
        assert session.busy is False

    @pytest.mark.asyncio
    async def test_ask_after_unlock_includes_secret(self, terminal, session, assistant):
        await self.run(terminal, session, "cd encrypted", "decrypt coordinates 071495", "ai where is she?")
        request = assistant.answer.await_args.args[0]
        assert COORDINATES_SECRET in request.system_instruction

    @pytest.mark.asyncio
    async def test_ask_marks_session_awaiting(self, terminal, session, assistant):
        """Тест флагов busy/awaiting во время запроса"""
        seen = {}

        async def answer(request):
            seen["busy"] = session.busy
            seen["awaiting"] = session.awaiting_assistant
            return "ok"

        assistant.answer.side_effect = answer
        await terminal.run_command(session, "ask anything")
        assert seen == {"busy": True, "awaiting": True}
        assert session.awaiting_assistant is False

    @pytest.mark.asyncio
    async def test_ask_failure_clears_busy_and_reports_once(self, terminal, session, assistant):
        """Тест ошибки ассистента"""
        assistant.answer.side_effect = TimeoutError("too slow")
        entries = await terminal.run_command(session, "ask anything")
        assert kinds(entries) == ["command", "error"]
        assert entries[1].content == "Failed to reach the AI server. Please try again later."
        assert session.busy is False
        assert session.awaiting_assistant is False

        assistant.answer.side_effect = None
        assistant.answer.return_value = "back online"
        entries = await terminal.run_command(session, "ask again")
        assert kinds(entries) == ["command", "assistant"]

    @pytest.mark.asyncio
    async def test_ask_without_question(self, terminal, session, assistant):
        entries = await terminal.run_command(session, "ask")
        assert contents(entries)[1:] == ["Usage: ask [your question]"]
        assistant.answer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_api_key_is_logged_without_traceback(self, session, caplog):
        """Тест: отсутствие ключа API не выводит трассировку в лог"""
        terminal = ArchiveTerminalTool(assistant=AnthropicAssistant(api_key=None), decrypt_delay=0)
        with caplog.at_level(logging.DEBUG, logger="cold_case_mcp"):
            entries = await terminal.run_command(session, "ask who is Maya?")

        assert kinds(entries) == ["command", "error"]
        assert entries[1].content == "Failed to reach the AI server. Please try again later."
        assert session.busy is False
        assert all(record.exc_info is None for record in caplog.records)
        assert all(record.levelno < logging.ERROR for record in caplog.records)
        assert any(
            record.levelno == logging.WARNING and "ANTHROPIC_API_KEY" in record.getMessage()
            for record in caplog.records
        )

    # --- listing copy ---

    @pytest.mark.asyncio
    async def test_copy_listing_name_logs_confirmation(self, terminal, session):
        """Тест записи о копировании имени файла"""
        entries = await terminal.run_command(session, "ls")
        row = entries[-1].listing

        entry = terminal.copy_listing_name(session, row)

        assert entry.kind == "success"
        assert entry.content == 'System: copied "notes" to clipboard.'
        assert session.transcript[-1] is entry

    @pytest.mark.asyncio
    async def test_listing_does_not_promise_clicks(self, terminal, session):
        header = (await terminal.run_command(session, "ls"))[1].content
        help_lines = contents(await terminal.run_command(session, "help ls"))
        assert "click" not in header.lower()
        assert not any("click" in line.lower() for line in help_lines)

    # --- clear ---

    @pytest.mark.asyncio
    async def test_clear_empties_transcript_including_its_echo(self, terminal, session):
        await terminal.run_command(session, "ls")
        assert await terminal.run_command(session, "clear") == []
        assert session.transcript == []
        entries = await terminal.run_command(session, "help ls")
        assert session.transcript == entries

    # --- execute (MCP entry) ---

    @pytest.mark.asyncio
    async def test_execute_requires_session(self, terminal):
        result = await terminal.execute({"command": "ls"})
        assert result.error_code == -1

    @pytest.mark.asyncio
    async def test_execute_rejects_input_while_busy(self, terminal, session):
        """Тест: ввод отклоняется, пока сессия занята"""
        session.busy = True
        before = list(session.transcript)
        result = await terminal.execute({"command": "ls", "_session": session})
        assert result.error_code == -1
        assert session.transcript == before

    @pytest.mark.asyncio
    async def test_execute_returns_transcript_text(self, terminal, session):
        result = await terminal.execute({"command": "cd notes", "_session": session})
        assert result.error_code == 0
        assert result.output == "> cd notes"
        assert result.data == {"cwd": "~/notes", "solved": False}

        result = await terminal.execute({"command": "open nothing", "_session": session})
        assert result.error_code == 1
        assert result.error == "File not found: nothing"

    def test_parameters(self, terminal):
        assert terminal.get_name() == "terminal"
        assert [p.name for p in terminal.get_parameters()] == ["command"]
