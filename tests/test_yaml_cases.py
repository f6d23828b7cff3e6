import pytest
import yaml
from pathlib import Path
from arithmetic_lexer import Tokenizer, UnrecognizedCharacter


def load_test_cases():
    """Load test cases from YAML file"""
    yaml_file = Path(__file__).parent / "test_cases.yaml"
    with open(yaml_file, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


@pytest.mark.parametrize("test_case", [
    case for category in load_test_cases().values()
    for case in category
], ids=lambda case: case['title'])
def test_yaml_cases(test_case):
    """Tokenize YAML test case inputs"""
    if 'skip' in test_case:
        pytest.skip(test_case['skip'])

    tokenizer = Tokenizer(test_case['input'], **test_case.get('options', {}))

    if 'error_offset' in test_case:
        with pytest.raises(UnrecognizedCharacter) as excinfo:
            tokenizer.tokenize()
        assert excinfo.value.offset == test_case['error_offset'], f"Test: {test_case['title']}"
        return

    result = [token.text.decode('ascii') for token in tokenizer]
    assert result == test_case['expected'], f"Test: {test_case['title']}"
