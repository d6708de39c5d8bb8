"""
Transport Option Unit Tests
Tests for curlwrap/http/options.py
"""
import pytest

from curlwrap.http.options import TransportOption, normalize_options
from curlwrap.http.state import ClientState
from curlwrap.schemas.errors import ConfigurationException, ErrorCodes


class TestParse:

    @pytest.mark.parametrize("name", [
        "FOLLOWLOCATION",
        "followlocation",
        "CURLOPT_FOLLOWLOCATION",
        "curlopt_FollowLocation",
        "  FOLLOWLOCATION ",
        TransportOption.FOLLOWLOCATION,
    ])
    def test_spellings(self, name):
        """Case and the CURLOPT_ prefix do not matter."""
        assert TransportOption.parse(name) is TransportOption.FOLLOWLOCATION

    def test_unknown_name(self):
        """Unknown names raise a configuration error."""
        with pytest.raises(ConfigurationException) as exc_info:
            TransportOption.parse("CURLOPT_WARP_DRIVE")
        assert exc_info.value.code == ErrorCodes.CONFIGURATION_ERROR

    def test_non_string_name(self):
        """Non-string names are rejected."""
        with pytest.raises(ConfigurationException):
            TransportOption.parse(42)  # type: ignore[arg-type]


class TestNormalize:

    def test_keys_become_enum_members(self):
        """Keys are turned into TransportOption members."""
        assert normalize_options({"timeout": 5, "CURLOPT_PROXY": "http://p:3128"}) == {
            TransportOption.TIMEOUT: 5,
            TransportOption.PROXY: "http://p:3128",
        }

    def test_later_spelling_wins(self):
        """The last spelling of the same option wins."""
        assert normalize_options({"timeout": 5, "CURLOPT_TIMEOUT": 9}) == {TransportOption.TIMEOUT: 9}

    def test_none(self):
        assert normalize_options(None) == {}

    @pytest.mark.parametrize("name", ["HEADER", "RETURNTRANSFER"])
    def test_managed_options_cannot_be_disabled(self, name):
        """Options the parser relies on cannot be turned off."""
        with pytest.raises(ConfigurationException):
            normalize_options({name: False})

    def test_managed_options_may_stay_on(self):
        """Managed options may be set to true."""
        assert normalize_options({"HEADER": True}) == {TransportOption.HEADER: True}


class TestClientStateOptions:

    def test_validated_at_construction(self):
        """ClientState validates option names up front."""
        with pytest.raises(ConfigurationException):
            ClientState(options={"bogus": 1})

    def test_set_option(self, state):
        """set_option normalizes the name."""
        state.set_option("CURLOPT_MAXREDIRS", 3)
        assert state.options == {TransportOption.MAXREDIRS: 3}

    def test_set_option_rejects_unknown(self, state):
        """A rejected option leaves the state unchanged."""
        with pytest.raises(ConfigurationException):
            state.set_option("bogus", 1)
        assert state.options == {}

    def test_none_user_agent_gets_default(self):
        """A None user agent becomes the library default."""
        assert ClientState(user_agent=None).user_agent.startswith("curlwrap/")
