"""
Unit tests for the device registry and command dispatch.
"""
import pytest
from structlog.testing import capture_logs

from gardenbridge.core.domain.entities import (
    ACTIVE_VALUE, HARDWARE_VERSION, SOFTWARE_VERSION, VENDOR_NAME, RemoteDevice
)
from gardenbridge.core.registry import DeviceRegistry, execute_command
from gardenbridge.shared.types import Archetype, DeviceCategory, DeviceID, PowerSource


@pytest.fixture
def registry(host):
    return DeviceRegistry(host)


class TestRegistration:
    """Test cases for building and registering representations."""

    async def test_register_builds_bridged_record(self, registry, host, sample_device, client):
        assert await registry.register(sample_device, client) is True

        representation = registry.get(sample_device.id)
        info = representation.basic_information
        assert representation.unique_id == "smart-irrigation-1"
        assert representation.archetype == Archetype.ON_OFF_OUTLET
        assert representation.power_source == PowerSource.WIRED
        assert info.name == "Smart Irrigation Controller"
        assert info.serial_number == "SN-smart-irrigation-1"
        assert info.vendor_id == host.aggregator_vendor_id
        assert info.vendor_name == VENDOR_NAME
        assert info.hardware_version == HARDWARE_VERSION
        assert info.software_version == SOFTWARE_VERSION
        assert host.get_device("smart-irrigation-1") is representation

    async def test_host_rejection_is_isolated(self, registry, host, client):
        host.rejected_ids.add("water-valve-1")
        devices = await client.fetch_devices()

        with capture_logs() as logs:
            results = [await registry.register(device, client) for device in devices]

        assert results.count(False) == 1
        assert "water-valve-1" not in registry
        assert len(registry) == 3
        assert any(log["event"] == "Error registering device" for log in logs)

    async def test_duplicate_registration_is_rejected(self, registry, sample_device, client):
        await registry.register(sample_device, client)

        assert await registry.register(sample_device, client) is False
        assert len(registry) == 1

    async def test_clear_unregisters_each_device(self, registry, host, client):
        for device in await client.fetch_devices():
            await registry.register(device, client)

        await registry.clear()

        assert len(registry) == 0
        assert host.devices == {}
        assert host.unregister_calls == 4
        assert host.unregister_all_calls == 0

    async def test_forget_all_leaves_host_untouched(self, registry, host, sample_device, client):
        await registry.register(sample_device, client)

        registry.forget_all()

        assert len(registry) == 0
        assert "smart-irrigation-1" in host.devices

    async def test_sensor_representation_has_no_commands(self, registry, client):
        await client.fetch_devices()
        sensor = client.get_device("soil-sensor-1")

        await registry.register(sensor, client)

        representation = registry.get(sensor.id)
        assert representation.archetype == Archetype.CONTACT_SENSOR
        assert representation.supported_verbs == frozenset()


class TestCommandDispatch:
    """Test cases for verb dispatch through the command table."""

    async def test_on_sends_mapped_command(self, registry, client, transport):
        await client.fetch_devices()
        await registry.register(client.get_device("smart-irrigation-1"), client)

        assert await registry.dispatch(DeviceID("smart-irrigation-1"), "on") is True

        assert transport.sent_commands == [("smart-irrigation-1", "on", None)]
        assert client.get_device("smart-irrigation-1").value == ACTIVE_VALUE

    async def test_valve_translates_to_open_and_close(self, registry, client, transport):
        await client.fetch_devices()
        await registry.register(client.get_device("water-valve-1"), client)
        representation = registry.get("water-valve-1")

        await representation.execute_command_handler("on")
        await representation.execute_command_handler("off")

        assert [c[1] for c in transport.sent_commands] == ["open", "close"]

    async def test_mower_translates_to_start_and_stop(self, registry, client, transport):
        await client.fetch_devices()
        await registry.register(client.get_device("smart-mower-1"), client)

        await registry.dispatch(DeviceID("smart-mower-1"), "on")
        await registry.dispatch(DeviceID("smart-mower-1"), "off")

        assert [c[1] for c in transport.sent_commands] == ["start", "stop"]

    async def test_command_value_is_forwarded(self, registry, client, transport):
        await client.fetch_devices()
        await registry.register(client.get_device("smart-irrigation-1"), client)

        await registry.dispatch(DeviceID("smart-irrigation-1"), "on", {"value": 30})

        assert transport.sent_commands == [("smart-irrigation-1", "on", 30)]

    async def test_unsupported_verb_sends_nothing(self, registry, client, transport):
        await client.fetch_devices()
        await registry.register(client.get_device("soil-sensor-1"), client)

        with capture_logs() as logs:
            assert await registry.dispatch(DeviceID("soil-sensor-1"), "on") is False

        assert transport.sent_commands == []
        assert any(log["event"] == "Unsupported command for device" for log in logs)

    async def test_dispatch_to_unregistered_device(self, registry):
        assert await registry.dispatch(DeviceID("ghost"), "on") is False

    async def test_representation_without_client_drops_command(self, registry, sample_device):
        representation = registry.build_representation(sample_device, None)

        assert await execute_command(representation, "on") is False

    async def test_remote_failure_is_reported_not_raised(self, registry, client, transport):
        await client.fetch_devices()
        await registry.register(client.get_device("smart-irrigation-1"), client)
        transport.failing_devices.add("smart-irrigation-1")

        assert await registry.dispatch(DeviceID("smart-irrigation-1"), "on") is False


class TestRemoteDevice:
    """Test cases for the remote device entity."""

    def test_unknown_category_is_normalized(self):
        device = RemoteDevice(id=DeviceID("x"), name="X", type="LAMP", category="lighting")

        assert device.category == DeviceCategory.UNKNOWN

    @pytest.mark.parametrize("level", [-1, 101])
    def test_battery_level_out_of_range(self, level):
        with pytest.raises(ValueError):
            RemoteDevice(id=DeviceID("x"), name="X", type="SENSOR", category="sensor", battery_level=level)

    def test_empty_id_is_rejected(self):
        with pytest.raises(ValueError):
            RemoteDevice(id=DeviceID(""), name="X", type="SENSOR", category="sensor")
