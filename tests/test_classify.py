import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from gobook.classify import CellKind, classify


class TestClassify(unittest.TestCase):
    def test_function_definitions(self):
        self.assertIs(classify("func add(a, b int) int {\n\treturn a + b\n}"), CellKind.DECLARATION)
        self.assertIs(classify("\n\t  func noop() {}"), CellKind.DECLARATION)
        self.assertIs(
            classify("func Map[T any](xs []T, f func(T) T) []T {\n\treturn xs\n}"),
            CellKind.DECLARATION,
        )

    def test_multiline_signature(self):
        text = "func join(\n\ta string,\n\tb string,\n) string {\n\treturn a + b\n}"
        self.assertIs(classify(text), CellKind.DECLARATION)

    def test_method_definition(self):
        text = "func (p *Point) Move(dx, dy int) {\n\tp.X += dx\n}"
        self.assertIs(classify(text), CellKind.DECLARATION)

    def test_type_definitions(self):
        self.assertIs(classify("\n\ttype TestType struct {\n\t\tx string\n\t\ty int\n\t}"), CellKind.DECLARATION)
        self.assertIs(classify("type Celsius float64"), CellKind.DECLARATION)
        self.assertIs(classify("type Pair[K comparable, V any] struct {\n\tk K\n\tv V\n}"), CellKind.DECLARATION)
        self.assertIs(classify("type (\n\tA int\n\tB string\n)"), CellKind.DECLARATION)

    def test_statements(self):
        self.assertIs(classify("print(10*50)"), CellKind.STATEMENT)
        self.assertIs(classify("x := 3\nfmt.Println(x)"), CellKind.STATEMENT)
        self.assertIs(classify("typed := 1"), CellKind.STATEMENT)
        self.assertIs(classify(""), CellKind.STATEMENT)

    def test_func_literals_are_statements(self):
        self.assertIs(classify("func() {\n\tfmt.Println(1)\n}()"), CellKind.STATEMENT)
        self.assertIs(classify("fmt.Println(func() int {\n\treturn 5 + 10\n}())"), CellKind.STATEMENT)

    def test_leading_comments_skipped(self):
        self.assertIs(classify("// add sums two ints\nfunc add(a, b int) int {\n\treturn a + b\n}"), CellKind.DECLARATION)
        self.assertIs(classify("/* Point is a 2D point.\n */\ntype Point struct {\n\tX, Y int\n}"), CellKind.DECLARATION)
        self.assertIs(classify("// one\n// two\n\n  func (p *Point) Move() {}"), CellKind.DECLARATION)
        self.assertIs(classify("// print it\nfmt.Println(1)"), CellKind.STATEMENT)
        self.assertIs(classify("/* unterminated\nfunc f() {}"), CellKind.STATEMENT)

    def test_declaration_must_come_first(self):
        # A definition after a statement does not make the cell a declaration.
        self.assertIs(classify("x := 1\nfunc f() {}"), CellKind.STATEMENT)

    def test_mixed_cell_classified_as_a_whole(self):
        text = "func f() int { return 1 }\nfmt.Println(f())"
        self.assertIs(classify(text), CellKind.DECLARATION)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
