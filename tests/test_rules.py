"""Tests for src/rules.py (the built-in rule table)."""

import pytest
from rich.color import Color
from rich.text import Text

from src.colors import color_for
from src.rules import default_rules, level_style, literal_pattern, make_level_badge


def _rule(name, pad_levels=False):
    return next(r for r in default_rules(pad_levels) if r.name == name)


def _named(fields):
    return {f.name: f.value for f in fields if f.name}


def _visible(styled):
    return Text.from_ansi(styled).plain


class TestSpringLog:
    def test_fields(self, spring_line):
        fields = _rule("spring-log").match(spring_line)
        named = _named(fields)
        assert named["timestamp"] == "2024-01-01T10:00:00.000+00:00"
        assert named["level"] == " INFO"
        assert named["pid"] == "12345"
        assert named["separator"] == "---"
        assert named["thread"] == "[main]"
        assert named["logger"] == "com.example.App"
        assert named["colon"] == ":"
        assert named["message"] == "starting up"

    def test_reconstruction(self, spring_line, color_output):
        styled = _rule("spring-log").apply(spring_line, color_output)
        assert styled != spring_line
        assert _visible(styled) == spring_line

    def test_level_badge_and_logger_color(self, spring_line, color_output):
        styled = _rule("spring-log").apply(spring_line, color_output)
        assert "\033[1;30;42m INFO\033[0m" in styled
        r, g, b = Color.parse(color_for("com.example.App")).triplet
        assert f"\033[1;38;2;{r};{g};{b}mApp\033[0m" in styled

    def test_application_name_variant(self):
        line = ("2024-01-01T10:00:00.000Z  WARN 1 --- [shop] [nio-8080-exec-1] "
                "o.s.web.servlet.PageNotFound : No mapping")
        named = _named(_rule("spring-log").match(line))
        assert named["application"] == "[shop]"
        assert named["thread"] == "[nio-8080-exec-1]"
        assert named["level"] == "  WARN"

    def test_boot2_timestamp(self):
        line = ("2019-03-05 10:57:51.112  INFO 45469 --- [           main] "
                "org.apache.catalina.core.StandardEngine  : Starting Servlet Engine")
        named = _named(_rule("spring-log").match(line))
        assert named["timestamp"] == "2019-03-05 10:57:51.112"
        assert named["thread"] == "[           main]"
        assert named["message"] == "Starting Servlet Engine"

    def test_sql_logger_fades_rest_of_line(self, color_output):
        line = ("2024-01-01T10:00:01.250+00:00 DEBUG 12345 --- [main] org.hibernate.SQL : "
                "select * from orders where url='https://x.example.com'")
        styled = _rule("spring-log").apply(line, color_output)
        assert "\033[2mselect * from orders where url='https://x.example.com'\033[0m" in styled
        assert "\033[4m" not in styled

    def test_message_urls_underlined(self, color_output):
        line = "2024-01-01T10:00:00.000+00:00 INFO 1 --- [main] a.B : see https://example.com/x"
        styled = _rule("spring-log").apply(line, color_output)
        assert "\033[4mhttps://example.com/x\033[0m" in styled


class TestLevelBadge:
    @pytest.mark.parametrize("level,bg", [
        ("TRACE", "cyan"), ("DEBUG", "blue"), ("INFO", "green"), ("WARN", "yellow"),
        ("ERROR", "red"), ("FATAL", "bright_red"), ("NOTICE", "bright_white"),
    ])
    def test_background_by_severity(self, level, bg):
        style = level_style(level).rich
        assert style.bgcolor.name == bg
        assert style.color.name == "black"
        assert style.bold

    def test_fatal_italic_underline(self, color_output):
        style = level_style("FATAL").rich
        assert style.italic and style.underline
        assert not level_style("ERROR").rich.italic
        assert color_output.render("FATAL", level_style("FATAL")) == "\033[1;3;4;30;101mFATAL\033[0m"

    def test_padding(self, color_output):
        badge = make_level_badge(pad=True)
        assert _visible(badge(color_output, "INFO")) == " INFO "

    def test_no_padding_by_default(self, color_output):
        badge = make_level_badge()
        assert _visible(badge(color_output, " INFO")) == " INFO"


class TestStackFrame:
    line = "\tat com.example.Foo.bar(Foo.java:42)"

    def test_fields(self):
        named = _named(_rule("stack-frame").match(self.line))
        assert named["class"] == "com.example.Foo."
        assert named["method"] == ")"   # second method field closes the call
        assert named["file"] == "Foo.java:42"

    def test_field_order(self):
        fields = _rule("stack-frame").match(self.line)
        assert [(f.name, f.value) for f in fields] == [
            ("at", "\tat "),
            ("class", "com.example.Foo."),
            ("method", "bar("),
            ("file", "Foo.java:42"),
            ("method", ")"),
        ]

    def test_project_frame_accent(self, color_output):
        styled = _rule("stack-frame").apply(self.line, color_output, "com.example")
        assert "\033[36mcom.example.Foo.\033[0m" in styled
        assert "\033[1;36mbar(\033[0m" in styled
        assert "\033[1;36mFoo.java:42\033[0m" in styled

    def test_library_frame(self, color_output):
        styled = _rule("stack-frame").apply(self.line, color_output, "org.acme")
        assert "\033[2mcom.example.Foo.\033[0m" in styled
        assert "\033[1mFoo.java:42\033[0m" in styled

    def test_internal_frame_faint(self, color_output):
        line = "\tat java.base/java.lang.Thread.run(Thread.java:833) ~[na:na]"
        styled = _rule("stack-frame").apply(line, color_output)
        assert styled == "\033[2m\tat \033[0m" + "".join(
            f"\033[2m{part}\033[0m"
            for part in ("java.base/java.lang.Thread.", "run(", "Thread.java:833", ")", " ~[na:na]")
        )

    def test_native_method(self):
        line = "\tat jdk.internal.reflect.NativeMethodAccessorImpl.invoke0(Native Method)"
        named = _named(_rule("stack-frame").match(line))
        assert named["no_file"] == "Native Method"

    def test_jar_suffix(self):
        line = "\tat org.springframework.aop.Foo.proceed(Foo.java:184) ~[spring-aop-6.1.1.jar:6.1.1]"
        named = _named(_rule("stack-frame").match(line))
        assert named["jar"] == " ~[spring-aop-6.1.1.jar:6.1.1]"

    def test_frame_found_mid_line(self, color_output):
        line = "prefix\tat a.B.c(B.java:1) suffix"
        styled = _rule("stack-frame").apply(line, color_output)
        assert styled.startswith("prefix")
        assert styled.endswith(" suffix")
        assert _visible(styled) == line


class TestException:
    def test_with_message(self):
        named = _named(_rule("exception").match("java.lang.IllegalStateException: boom"))
        assert named["exception_path"] == "java.lang."
        assert named["exception_name"] == "IllegalStateException"
        assert named["message"] == " boom"

    def test_caused_by(self):
        named = _named(_rule("exception").match("Caused by: java.sql.SQLException: refused"))
        assert named["caused_by"] == "Caused by: "

    def test_error_without_message(self):
        named = _named(_rule("exception").match("java.lang.OutOfMemoryError"))
        assert named["exception_name"] == "OutOfMemoryError"

    def test_plain_sentence_not_matched(self):
        assert _rule("exception").match("An Exception occurred") is None


class TestBuildTools:
    def test_gradle_task_states(self, color_output):
        rule = _rule("gradle-task")
        assert "\033[32m UP-TO-DATE\033[0m" in rule.apply("> Task :compileJava UP-TO-DATE", color_output)
        assert "\033[31m FAILED\033[0m" in rule.apply("> Task :test FAILED", color_output)
        assert "\033[97m NO-SOURCE\033[0m" in rule.apply("> Task :processResources NO-SOURCE", color_output)

    def test_gradle_task_without_state(self):
        named = _named(_rule("gradle-task").match("> Task :bootJar"))
        assert named == {"name": ":bootJar"}

    def test_gradle_build(self, color_output):
        rule = _rule("gradle-build")
        assert rule.apply("BUILD SUCCESSFUL in 3s", color_output).startswith("\033[1;32mBUILD SUCCESSFUL")
        assert rule.apply("BUILD FAILED in 3s", color_output).startswith("\033[1;31mBUILD FAILED")

    def test_maven_build(self):
        named = _named(_rule("maven-build").match("[INFO] BUILD FAILURE"))
        assert named == {"maven_level": "[INFO]", "failed": "BUILD FAILURE"}

    def test_maven_line(self, color_output):
        styled = _rule("maven-line").apply("[ERROR] Failed to execute goal", color_output)
        assert styled == "\033[1;31m[ERROR]\033[0m Failed to execute goal"

    def test_frames_omitted(self, color_output):
        assert _rule("frames-omitted").apply("\t... 12 more", color_output) == "\033[2m\t... 12 more\033[0m"


class TestSpringBanner:
    def test_all_banner_lines(self, sample_lines):
        rule = _rule("spring-banner")
        for line in sample_lines[:6]:
            assert rule.match(line) is not None, line

    def test_version_line(self):
        named = _named(_rule("spring-version").match(" :: Spring Boot ::                (v3.2.0)"))
        assert named["version"] == "(v3.2.0)"

    def test_literal_pattern_suffixes_duplicates(self):
        pattern = literal_pattern([("a", "x"), ("a", "y")])
        assert pattern == "^(?P<a>x)(?P<a__2>y)$"


class TestWholeTable:
    def test_sample_log_reconstructs(self, sample_lines, beautifier):
        for line in sample_lines:
            styled, _ = beautifier.apply(line, "com.example.shop")
            assert _visible(styled) == line

    def test_rule_names_unique(self):
        names = [r.name for r in default_rules()]
        assert len(names) == len(set(names))

    def test_padding_option_reaches_spring_rule(self, spring_line, color_output):
        styled = _rule("spring-log", pad_levels=True).apply(spring_line, color_output)
        assert "  INFO " in _visible(styled)
