"""Tests for full and incremental build passes."""
from __future__ import annotations

from pathlib import Path

import pytest

from helpers.fakes import CountingFileStore
from helpers.files import write_tree
from pagebundler.core.build import KIND_PAGE, KIND_STYLE, BuildCoordinator, BuildState, PASS_FULL, PASS_INCREMENTAL
from pagebundler.core.config import BundlerSettings
from pagebundler.core.exceptions import PipelineError

FILES = {
    "src/a.html": '<html><head></head><body>PageBundler.include("shared.html")</body></html>',
    "src/b.html": '<html><head></head><body>PageBundler.include("shared.html")PageBundler.include("only-b")</body></html>',
    "src/c.html": "<html><head></head><body>c</body></html>",
    "src/shared.html": "<header>shared</header>",
    "src/only-b.html": "<aside>b</aside>",
    "styles/site.css": '@import "base.css";\nbody { color: red; }',
    "styles/base.css": "html { margin: 0; }",
    "styles/c.css": "p { margin: 0; }",
}
SITE_CSS = "css/site.[contenthash].css"


def _settings(root: Path, **overrides) -> BundlerSettings:
    data = {
        "output_path": "dist",
        "entry": {
            "global": {"styles": [{"import": "styles/site.css", "filename": SITE_CSS}]},
            "a": {"import": "src/a.html", "filename": "a.html"},
            "b": {"import": "src/b.html", "filename": "b.html"},
            "c": {
                "import": "src/c.html",
                "filename": "c.html",
                "styles": [{"import": "styles/c.css", "filename": "css/c.css"}],
            },
        },
    }
    data.update(overrides)
    return BundlerSettings.from_dict(data, root)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    return write_tree(tmp_path / "proj", FILES)


def _written_pages(store: CountingFileStore, root: Path):
    return sorted(p.name for p in store.writes if p.suffix == ".html")


class TestProcessAll:
    def test_builds_every_page_and_records_dependencies(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        report = coordinator.process_all()

        assert report.kind == PASS_FULL
        assert report.ok, report.errors
        assert report.pages == ["a", "b", "c"]
        records = coordinator.records
        assert records[(project / "src" / "a.html", "a.html")].dependencies == (project / "src" / "shared.html",)
        assert records[(project / "src" / "b.html", "b.html")].dependencies == (
            project / "src" / "shared.html",
            project / "src" / "only-b.html",
        )
        assert records[(project / "src" / "c.html", "c.html")].dependencies == ()
        assert records[(project / "src" / "a.html", "a.html")].kind == KIND_PAGE
        assert records[(project / "styles" / "site.css", SITE_CSS)].kind == KIND_STYLE
        assert project / "styles" / "base.css" in records[(project / "styles" / "site.css", SITE_CSS)]

    def test_global_entry_has_no_page_and_links_everywhere(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        dist = project / "dist"
        assert not (dist / "global").exists()
        hashed = coordinator.styles.output_names[(project / "styles" / "site.css", SITE_CSS)]
        for name in ("a.html", "b.html", "c.html"):
            assert f'href="/{hashed}"' in (dist / name).read_text(encoding="utf-8")
        assert 'href="/css/c.css"' in (dist / "c.html").read_text(encoding="utf-8")
        assert 'href="/css/c.css"' not in (dist / "a.html").read_text(encoding="utf-8")

    def test_broken_page_does_not_stop_siblings(self, project: Path) -> None:
        (project / "src" / "only-b.html").unlink()
        coordinator = BuildCoordinator(_settings(project))
        report = coordinator.process_all()
        assert report.pages == ["a", "b", "c"]
        assert len(report.errors) == 1 and report.errors[0].startswith("b:")
        assert (project / "dist" / "b.html").read_text(encoding="utf-8").startswith("PageBundler Exception:")
        assert (project / "src" / "b.html", "b.html") not in coordinator.records
        assert (project / "dist" / "c.html").exists()

    def test_failed_stylesheet_is_reported(self, project: Path) -> None:
        (project / "styles" / "base.css").unlink()
        report = BuildCoordinator(_settings(project)).process_all()
        assert any("site.css" in e for e in report.errors)
        assert report.pages == ["a", "b", "c"]

    def test_clean_runs_once_before_styles(self, project: Path) -> None:
        write_tree(project, {"dist/css/stale.css": "old"})
        store = CountingFileStore()
        coordinator = BuildCoordinator(_settings(project, clean=True), file_store=store)
        coordinator.process_all()
        assert store.removed == [project / "dist" / "css"]
        assert not (project / "dist" / "css" / "stale.css").exists()
        assert (project / "dist" / "css" / "c.css").exists()

        coordinator.process_changed(project / "styles" / "c.css")
        assert len(store.removed) == 1

    def test_same_stylesheet_is_written_for_each_output(self, project: Path) -> None:
        settings = BundlerSettings.from_dict(
            {
                "output_path": "dist",
                "entry": {
                    "a": {
                        "import": "src/a.html",
                        "filename": "a.html",
                        "styles": [{"import": "styles/c.css", "filename": "css/a.css"}],
                    },
                    "b": {
                        "import": "src/c.html",
                        "filename": "b.html",
                        "styles": [{"import": "styles/c.css", "filename": "css/b.css"}],
                    },
                },
            },
            project,
        )
        coordinator = BuildCoordinator(settings)
        report = coordinator.process_all()

        assert report.ok, report.errors
        assert report.styles == ["css/a.css", "css/b.css"]
        assert sorted(p.name for p in (project / "dist" / "css").iterdir()) == ["a.css", "b.css"]
        assert 'href="/css/b.css"' in (project / "dist" / "b.html").read_text(encoding="utf-8")
        assert (project / "styles" / "c.css", "css/a.css") in coordinator.records
        assert (project / "styles" / "c.css", "css/b.css") in coordinator.records

        incremental = coordinator.process_changed(project / "styles" / "c.css")
        assert incremental.styles == ["css/a.css", "css/b.css"]

    def test_missing_property_and_chunk_are_reported_as_warnings(self, project: Path) -> None:
        write_tree(project, {"src/d.html": "<html><head></head><body>PageBundler.include.nope</body></html>"})
        data = {
            "output_path": "dist",
            "entry": {"d": {"import": "src/d.html", "filename": "d.html", "jschunks": [{"name": "missing"}]}},
        }
        report = BuildCoordinator(BundlerSettings.from_dict(data, project)).process_all()

        assert report.ok
        assert report.warnings == [
            "d: Property 'nope' not found in include properties",
            "d: Script chunk not found: missing",
        ]
        assert "Warnings: 2" in report.summary()

    def test_sitemap_only_in_production(self, project: Path) -> None:
        sitemap = {"origin_url": "https://example.com"}
        dev = BuildCoordinator(_settings(project, sitemap=sitemap)).process_all()
        assert dev.sitemap is None
        prod = BuildCoordinator(_settings(project, sitemap=sitemap, mode="production")).process_all()
        xml = (project / "dist" / "sitemap.xml").read_text(encoding="utf-8")
        assert prod.sitemap == str(project / "dist" / "sitemap.xml")
        assert "<loc>https://example.com/a.html</loc>" in xml
        assert "<loc>https://example.com/c.html</loc>" in xml


class TestProcessChanged:
    def test_shared_fragment_rebuilds_all_owners(self, project: Path) -> None:
        store = CountingFileStore()
        coordinator = BuildCoordinator(_settings(project), file_store=store)
        coordinator.process_all()
        store.writes.clear()

        report = coordinator.process_changed(project / "src" / "shared.html")
        assert report.kind == PASS_INCREMENTAL
        assert report.pages == ["a", "b"]
        assert _written_pages(store, project) == ["a.html", "b.html"]

    def test_private_fragment_rebuilds_only_its_page(self, project: Path) -> None:
        store = CountingFileStore()
        coordinator = BuildCoordinator(_settings(project), file_store=store)
        coordinator.process_all()
        store.writes.clear()

        (project / "src" / "only-b.html").write_text("<aside>changed</aside>", encoding="utf-8")
        report = coordinator.process_changed(project / "src" / "only-b.html")
        assert report.pages == ["b"]
        assert _written_pages(store, project) == ["b.html"]
        assert "changed" in (project / "dist" / "b.html").read_text(encoding="utf-8")

    def test_unrelated_file_rebuilds_nothing(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        report = coordinator.process_changed(project / "src" / "unknown.html")
        assert report.pages == [] and report.styles == []

    def test_unrecorded_page_is_not_rebuilt(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        report = coordinator.process_changed(project / "src" / "shared.html")
        assert report.pages == []

    def test_record_is_replaced_on_rebuild(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        (project / "src" / "b.html").write_text(
            '<html><head></head><body>PageBundler.include("shared.html")</body></html>', encoding="utf-8"
        )
        coordinator.process_changed(project / "src" / "shared.html")
        record = coordinator.records[(project / "src" / "b.html", "b.html")]
        assert record.dependencies == (project / "src" / "shared.html",)
        assert project / "src" / "only-b.html" not in coordinator.watched_files()

    def test_failed_rebuild_keeps_previous_record(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        before = coordinator.records[(project / "src" / "b.html", "b.html")]
        (project / "src" / "only-b.html").write_text('PageBundler.include("gone.html")', encoding="utf-8")
        report = coordinator.process_changed(project / "src" / "only-b.html")
        assert not report.ok
        assert coordinator.records[(project / "src" / "b.html", "b.html")] == before

    def test_stylesheet_change_with_new_hash_rebuilds_linking_pages(self, project: Path) -> None:
        store = CountingFileStore()
        coordinator = BuildCoordinator(_settings(project), file_store=store)
        coordinator.process_all()
        old_name = coordinator.styles.output_names[(project / "styles" / "site.css", SITE_CSS)]
        store.writes.clear()

        (project / "styles" / "base.css").write_text("html { margin: 1px; }", encoding="utf-8")
        report = coordinator.process_changed(project / "styles" / "base.css")
        new_name = coordinator.styles.output_names[(project / "styles" / "site.css", SITE_CSS)]
        assert new_name != old_name
        assert report.styles == [new_name]
        assert report.pages == ["a", "b", "c"]
        assert f'href="/{new_name}"' in (project / "dist" / "a.html").read_text(encoding="utf-8")

    def test_stylesheet_change_without_hash_rebuilds_only_style(self, project: Path) -> None:
        store = CountingFileStore()
        coordinator = BuildCoordinator(_settings(project), file_store=store)
        coordinator.process_all()
        store.writes.clear()

        report = coordinator.process_changed(project / "styles" / "c.css")
        assert report.styles == ["css/c.css"]
        assert report.pages == []


class TestHandleChanges:
    def test_single_recorded_file_is_incremental(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        assert coordinator.handle_changes([project / "src" / "shared.html"]).kind == PASS_INCREMENTAL

    def test_other_change_sets_run_full_pass(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        assert coordinator.handle_changes([]).kind == PASS_FULL
        assert coordinator.handle_changes([project / "src" / "unknown.html"]).kind == PASS_FULL
        both = [project / "src" / "shared.html", project / "src" / "only-b.html"]
        assert coordinator.handle_changes(both).kind == PASS_FULL

    def test_root_file_change_runs_full_pass(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        assert coordinator.handle_changes([project / "src" / "c.html"]).kind == PASS_FULL


class TestState:
    def test_idle_after_pass(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        assert coordinator.state is BuildState.IDLE
        coordinator.process_all()
        assert coordinator.state is BuildState.IDLE

    def test_trigger_while_building_is_rejected(self, project: Path) -> None:
        class ReentrantMinifier:
            def __init__(self) -> None:
                self.coordinator = None
                self.seen = []

            def minify(self, html, options):
                try:
                    self.coordinator.process_all()
                except PipelineError as exc:
                    self.seen.append(exc)
                return html

        minifier = ReentrantMinifier()
        coordinator = BuildCoordinator(_settings(project, mode="production"), minifier=minifier)
        minifier.coordinator = coordinator
        coordinator.process_all()
        assert len(minifier.seen) == 3
        assert coordinator.state is BuildState.IDLE

    def test_watched_files_is_sorted_union(self, project: Path) -> None:
        coordinator = BuildCoordinator(_settings(project))
        coordinator.process_all()
        watched = coordinator.watched_files()
        assert watched == sorted(watched)
        assert project / "src" / "shared.html" in watched
        assert project / "styles" / "base.css" in watched
        assert project / "styles" / "site.css" in watched
