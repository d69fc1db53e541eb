from app.adapters.path_cache import PathCache

PATH = "/dashboard/invoices"


def test_render_is_cached_per_variant():
    cache = PathCache()
    calls = []

    def render():
        calls.append(1)
        return {"n": len(calls)}

    assert cache.get_or_render(PATH, render, ("", 1)) == {"n": 1}
    assert cache.get_or_render(PATH, render, ("", 1)) == {"n": 1}
    assert cache.get_or_render(PATH, render, ("amy", 1)) == {"n": 2}
    assert cache.variant_count(PATH) == 2


def test_revalidate_drops_all_variants():
    cache = PathCache()
    cache.set(PATH, "a", ("", 1))
    cache.set(PATH, "b", ("", 2))
    cache.set("/dashboard/customers", "c")
    cache.revalidate_path(PATH)
    assert not cache.is_cached(PATH)
    assert cache.get(PATH, ("", 1)) is None
    assert cache.get("/dashboard/customers") == "c"


def test_render_overlapping_a_revalidation_is_not_stored():
    cache = PathCache()

    def render():
        # a write commits and invalidates while this render is in flight
        cache.revalidate_path(PATH)
        return {"rows": "old"}

    assert cache.get_or_render(PATH, render, ("", 1)) == {"rows": "old"}
    assert not cache.is_cached(PATH)
    assert cache.get_or_render(PATH, lambda: {"rows": "new"}, ("", 1)) == {"rows": "new"}
    assert cache.get(PATH, ("", 1)) == {"rows": "new"}


def test_set_with_stale_generation_is_refused():
    cache = PathCache()
    started = cache.generation(PATH)
    cache.revalidate_path(PATH)
    assert cache.set(PATH, "stale", ("", 1), generation=started) is False
    assert cache.set(PATH, "fresh", ("", 1), generation=cache.generation(PATH)) is True


def test_variants_are_bounded_least_recently_used_first():
    cache = PathCache(max_variants=3)
    for q in ("a", "b", "c"):
        cache.set(PATH, q, (q, 1))
    cache.get(PATH, ("a", 1))  # touch a; b is now oldest
    cache.set(PATH, "d", ("d", 1))

    assert cache.variant_count(PATH) == 3
    assert cache.get(PATH, ("b", 1)) is None
    assert cache.get(PATH, ("a", 1)) == "a"
    assert cache.get(PATH, ("d", 1)) == "d"


def test_many_distinct_queries_do_not_grow_without_limit():
    cache = PathCache(max_variants=10)
    for i in range(500):
        cache.get_or_render(PATH, lambda: {"i": i}, (f"q{i}", 1))
    assert cache.variant_count(PATH) == 10
