from voxelplace.utils.display import LiveLogger, StatusDisplay


def test_quiet_logger_keeps_history(capsys):
    logger = LiveLogger(verbose=False)
    logger.log_info("hello")
    logger.log_warning("careful")
    logger.log_error("broken")

    assert capsys.readouterr().out == ""
    assert logger.messages("warning") == ["careful"]
    assert logger.messages("error") == ["broken"]
    assert len(logger.history) == 3


def test_verbose_logger_prints(capsys):
    logger = LiveLogger(verbose=True)
    logger.log_step_start(1, "spawn")
    logger.log_step_end(1, "done")
    out = capsys.readouterr().out
    assert "Starting Step 1: spawn" in out
    assert "Step 1 completed: done" in out


def test_print_results_formats_values(capsys):
    StatusDisplay.print_results({"placed": 3, "complete": True, "ratio": 0.5})
    out = capsys.readouterr().out
    assert "placed" in out
    assert "0.500" in out
    assert "✅" in out
