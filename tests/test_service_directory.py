from labby.metrics import ServiceKind
from labby.models import StoredService
from labby.service_directory import ServiceDirectory


def test_save_update_delete(tmp_path):
    directory = ServiceDirectory(tmp_path)
    pve = directory.save_service(StoredService(id="pve", name="Proxmox", kind=ServiceKind.HYPERVISOR, home="Lab"))
    directory.save_service(StoredService(id="jf", name="Jellyfin", kind=ServiceKind.MEDIA_SERVER, home="Media"))
    directory.save_service(StoredService(id="dns", name="Pi-hole", kind=ServiceKind.DNS_FILTER, home="Lab"))

    assert [s.id for s in directory.services_for_home("Lab")] == ["pve", "dns"]

    directory.save_service(pve.model_copy(update={"name": "PVE"}))
    assert directory.get_service("pve").name == "PVE"
    assert [s.id for s in directory.load_services()] == ["pve", "jf", "dns"]

    assert directory.delete_service("jf") is True
    assert directory.delete_service("jf") is False
    assert directory.get_service("jf") is None


def test_unreadable_entries_are_skipped(tmp_path):
    (tmp_path / "services.json").write_text(
        '[{"id": "pve", "kind": "hypervisor"}, {"id": "nas", "kind": "synology"}]',
        encoding="utf-8",
    )
    assert [s.id for s in ServiceDirectory(tmp_path).load_services()] == ["pve"]


def test_corrupt_file_reads_as_empty(tmp_path):
    (tmp_path / "services.json").write_text("{not json", encoding="utf-8")
    assert ServiceDirectory(tmp_path).load_services() == []
