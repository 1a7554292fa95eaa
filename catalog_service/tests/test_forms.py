import pytest

from catalog_service.forms import NAME_MAX_LENGTH, clean_resource_form


def test_trims_name_and_description():
    data = clean_resource_form("  Owner ", description="  primary owner  ", has_details=True)
    assert data.name == "Owner"
    assert data.description == "primary owner"
    assert data.has_details is True


def test_blank_description_dropped():
    assert clean_resource_form("Owner", description="   ").description is None


@pytest.mark.parametrize("name", ["", "   "])
def test_name_required(name):
    with pytest.raises(ValueError, match="required"):
        clean_resource_form(name)


def test_name_length_limit():
    assert clean_resource_form("x" * NAME_MAX_LENGTH).name == "x" * NAME_MAX_LENGTH
    with pytest.raises(ValueError, match="at most"):
        clean_resource_form("x" * (NAME_MAX_LENGTH + 1))


def test_expandable_flag():
    assert clean_resource_form("Folder", expandable=True).build("f").children == []
