from .equivalence import check_for_cli, normal_form
from .rewrite.core import RewriteContext
from .snippets import SCENARIOS, scenario_source
from .writer import IndentingWriter, surrounding_box_title


def run_demo() -> None:
    writer = IndentingWriter()
    context = RewriteContext(writer=writer)

    writer.println("ALGEBRAIC EQUIVALENCE", with_title_box=True)
    for first, second, _ in SCENARIOS:
        verdict = check_for_cli(first, second, context)
        writer.println(f"{scenario_source(first, second)}  ->  {verdict}")

    with surrounding_box_title(writer):
        source = "(a + b) * (a - b)"
        writer.println(f"normal_form({source!r}) -> {normal_form(source, context)}")


if __name__ == "__main__":
    run_demo()
