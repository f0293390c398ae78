from unittest.mock import patch

from pojogen import __main__


class TestCmdFunctions:
    @patch("pojogen.db_codegen.main")
    def test_cmd_generate_success(self, mock_main):
        result = __main__.cmd_generate(["schema.yaml"])
        assert result == 0
        mock_main.assert_called_once_with(["schema.yaml"])

    @patch("pojogen.db_codegen.main")
    def test_cmd_generate_failure(self, mock_main):
        mock_main.side_effect = SystemExit(1)
        result = __main__.cmd_generate([])
        assert result == 1

    @patch("pojogen.db_codegen.main")
    def test_cmd_generate_error_message(self, mock_main, capsys):
        mock_main.side_effect = SystemExit("Error: boom")
        result = __main__.cmd_generate([])
        assert result == 1
        assert "Error: boom" in capsys.readouterr().err

    @patch("pojogen.db_codegen.names_main")
    def test_cmd_names_success(self, mock_main):
        result = __main__.cmd_names(["schema.yaml"])
        assert result == 0
        mock_main.assert_called_once_with(["schema.yaml"])

    @patch("pojogen.db_codegen.names_main")
    def test_cmd_names_failure(self, mock_main):
        mock_main.side_effect = SystemExit(2)
        result = __main__.cmd_names([])
        assert result == 2


class TestMain:
    def test_main_help(self):
        with patch("builtins.print") as mock_print:
            result = __main__.main([])
            assert result == 0
            mock_print.assert_called()

    def test_main_help_flag(self, capsys):
        result = __main__.main(["--help"])
        assert result == 0
        assert "generate" in capsys.readouterr().out

    def test_main_unknown_command(self, capsys):
        result = __main__.main(["unknown"])
        assert result == 1
        assert "Unknown command: unknown" in capsys.readouterr().out

    @patch("pojogen.db_codegen.main")
    def test_main_valid_command(self, mock_main):
        result = __main__.main(["generate", "schemas", "--output-dir", "out"])
        assert result == 0
        mock_main.assert_called_once_with(["schemas", "--output-dir", "out"])

    @patch("pojogen.db_codegen.main")
    def test_main_reads_sys_argv(self, mock_main):
        with patch("sys.argv", ["pojogen", "generate", "schema.yaml"]):
            result = __main__.main()
        assert result == 0
        mock_main.assert_called_once_with(["schema.yaml"])
