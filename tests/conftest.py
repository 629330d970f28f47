"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))


RIS_SAMPLE = (
    "TY  - JOUR\n"
    "TI  - Machine learning for citation screening\n"
    "AU  - Smith, John Adam\n"
    "AU  - Doe, Jane\n"
    "JF  - Journal of Evidence Synthesis\n"
    "JA  - J Evid Synth\n"
    "PY  - 2023/06/15\n"
    "VL  - 12\n"
    "IS  - 3\n"
    "SP  - 1234\n"
    "EP  - 45\n"
    "DO  - 10.1000/JES.2023.001\n"
    "KW  - screening\n"
    "KW  - automation\n"
    "ER  - \n"
    "\n"
    "TY  - BOOK\n"
    "T1  - Systematic reviews in practice\n"
    "AU  - Brown, Alice\n"
    "PY  - 2021\n"
    "ER  - \n"
)

PUBMED_SAMPLE = (
    "PMID- 12345678\n"
    "TI  - Effects of exercise on sleep quality: a randomized\n"
    "      controlled trial.\n"
    "FAU - Watson, James Dewey\n"
    "AU  - Watson JD\n"
    "AD  - Cold Spring Harbor Laboratory, New York.\n"
    "FAU - Crick, Francis Harry Compton\n"
    "AU  - Crick FH\n"
    "DP  - 2023 Jun 15\n"
    "JT  - Journal of Sleep Research\n"
    "TA  - J Sleep Res\n"
    "VI  - 32\n"
    "IP  - 4\n"
    "PG  - e13890\n"
    "LID - 10.1111/jsr.13890 [doi]\n"
    "PT  - Journal Article\n"
    "PT  - Randomized Controlled Trial\n"
    "MH  - Exercise\n"
    "MH  - Sleep\n"
    "LA  - eng\n"
    "\n"
    "PMID- 87654321\n"
    "TI  - Second record.\n"
    "DP  - 2022\n"
)

CSV_SAMPLE = (
    "Title,Authors,Journal,Year,Volume,Pages,DOI,Keywords,Notes\n"
    'Deep learning for reviews,"Smith, John; Doe, Jane",Nature,2023,5,123-45,'
    "10.1038/S41586,ml; review,first\n"
    "Another paper,Brown A,Science,2021/03,7,10-12,,,\n"
)

ENDNOTE_SAMPLE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<xml><records>\n"
    "<record>\n"
    '<ref-type name="Journal Article">17</ref-type>\n'
    "<contributors><authors>\n"
    "<author><style>Smith, John A.</style></author>\n"
    "<author>Doe, Jane</author>\n"
    "</authors></contributors>\n"
    "<titles>\n"
    "<title><style>Citation parsing at scale</style></title>\n"
    "<secondary-title>Journal of Informatics</secondary-title>\n"
    "<alt-title>J Inform</alt-title>\n"
    "</titles>\n"
    "<pages>101-9</pages>\n"
    "<volume>8</volume>\n"
    "<number>2</number>\n"
    '<dates><year year="2020" month="5" day="40">2020</year></dates>\n'
    "<electronic-resource-num>https://doi.org/10.5555/ABC.1</electronic-resource-num>\n"
    "<keywords><keyword>parsing</keyword><keyword>xml</keyword></keywords>\n"
    "</record>\n"
    "<record>\n"
    "<titles><title>Second</title></titles>\n"
    "</record>\n"
    "</records></xml>\n"
)


@pytest.fixture
def ris_text() -> str:
    """Two-record RIS sample."""
    return RIS_SAMPLE


@pytest.fixture
def pubmed_text() -> str:
    """Two-record PubMed sample."""
    return PUBMED_SAMPLE


@pytest.fixture
def csv_text() -> str:
    """Two-row CSV sample with an unmapped column."""
    return CSV_SAMPLE


@pytest.fixture
def endnote_text() -> str:
    """Two-record EndNote XML sample."""
    return ENDNOTE_SAMPLE


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing text (or bytes) into a file under ``tmp_path``."""

    def _factory(name: str, content: str | bytes) -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8", newline="\n")
        return path

    return _factory
