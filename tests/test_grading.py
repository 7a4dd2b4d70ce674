from codesandbox.runners import grading


def test_json_arrays_compare_order_insensitively():
    assert grading.outputs_match("[1,0]", "[0,1]")
    assert grading.outputs_match("[0, 1]", "[0,1]")
    assert not grading.outputs_match("[0,1,2]", "[0,1]")


def test_json_primitives():
    assert grading.outputs_match("true", "true")
    assert not grading.outputs_match("true", "1")
    assert grading.outputs_match("3", "3.0")
    assert grading.outputs_match('"abc"', '"abc"')
    assert grading.outputs_match('{"a": 1}', '{"a":1}')


def test_falls_back_to_numbers_then_strings():
    assert grading.outputs_match("  007 ", "7")
    assert grading.outputs_match("Hello World", "hello world")
    assert not grading.outputs_match("hello", "world")


def test_find_function():
    assert grading.find_function("javascript", "const x = 1;\nfunction twoSum(nums, t) {}") == "twoSum"
    assert grading.find_function("python", "import os\n\ndef is_valid(s):\n    pass") == "is_valid"
    assert grading.find_function("python", "x = lambda: 1") is None


def test_js_harness_passes_json_input_as_one_argument():
    src = grading.build_harness("javascript", "function f(a) { return a }", "[1, 2]")
    assert "const result = f([1, 2]);" in src
    assert "console.log(JSON.stringify(result));" in src


def test_js_harness_pastes_raw_argument_list():
    src = grading.build_harness("javascript", "function twoSum(n, t) {}", "[2,7,11,15], 9")
    assert "twoSum([2,7,11,15], 9)" in src


def test_python_harness():
    src = grading.build_harness("python", "def double(x):\n    return x * 2\n", "21")
    assert "result = double(_json.loads('21'))" in src
    assert "print(_json.dumps(result))" in src


def test_no_function_means_no_harness():
    assert grading.build_harness("javascript", "console.log(1)", "1") is None


def test_nan_and_infinity_are_not_json():
    assert grading.outputs_match("NaN", "NaN")
    assert grading.outputs_match("Infinity", "infinity")
    assert not grading.outputs_match("NaN", "0")
    assert "_json.loads" not in grading.build_harness("python", "def f(x):\n    return x\n", "NaN")
