"""
Streamlit UI for CineFind.
Calls the local FastAPI server at http://localhost:8000 for trending searches
and movie results. The search term settles when the user presses Enter.

Run API:   uvicorn api:app --reload
Run UI:    streamlit run streamlit_app.py
"""

# HTTP client to call the API
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:8000"  # default API base URL
# Shown when a movie has no poster
NO_POSTER_URL = "https://placehold.co/300x450?text=No+Poster"  # placeholder image
# Same generic text the browser page shows
GENERIC_ERROR = "Failed to fetch movies. Please try again later."

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="CineFind", layout="wide")  # wide layout

# Main page title
st.title("🎬 Find Movies You'll Enjoy Without the Hassle")  # friendly header

# Sidebar contains configuration controls
with st.sidebar:
	st.header("Settings")  # section label
	api_url = st.text_input("API URL", DEFAULT_API_URL, key="api_url")  # where the API lives
	columns_per_row = st.slider("Posters per row", min_value=3, max_value=8, value=5, key="columns_per_row")  # grid width

# Main text input; Streamlit reruns the script when the user presses Enter
query = st.text_input("Search", placeholder="Search through thousands of movies", key="query")

# Trending section is best effort: hide it if the API cannot provide it
trending = []  # list of trending entries
try:
	resp = requests.get(f"{api_url}/trending", timeout=10)  # ask the API
	resp.raise_for_status()  # raise error if server responded with an error code
	trending = resp.json()  # parse JSON returned by API
except requests.RequestException as e:
	st.sidebar.info(f"Trending unavailable: {e}")  # note for the operator

if trending:
	st.subheader("Trending Movies")  # section label
	cols = st.columns(len(trending))  # one column per entry
	for col, entry in zip(cols, trending):
		with col:
			st.markdown(f"**{entry['rank']}**")  # rank number
			st.image(entry.get("poster_url") or NO_POSTER_URL, caption=entry["term"])  # poster

st.subheader("All Movies")  # section label

# Widget changes rerun the whole script; only a new settled term (or API) fetches again
settled = (api_url, query.strip())  # what the current payload belongs to
if st.session_state.get("settled") != settled:
	with st.spinner("Loading..."):
		try:
			resp = requests.get(f"{api_url}/movies", params={"query": settled[1]}, timeout=30)
			resp.raise_for_status()  # raise error if server responded with an error code
			payload = resp.json()  # parse JSON returned by API
		except requests.RequestException:
			payload = {"status": "error", "error_message": GENERIC_ERROR, "results": []}
	st.session_state["settled"] = settled  # remember the term we fetched for
	st.session_state["payload"] = payload  # reused by later reruns
payload = st.session_state["payload"]  # result for the current settled term

if payload.get("status") == "error":
	st.error(payload.get("error_message") or GENERIC_ERROR)  # inline error
else:
	results = payload.get("results", [])  # movies in service order
	for start in range(0, len(results), columns_per_row):
		cols = st.columns(columns_per_row)  # one grid row
		for col, movie in zip(cols, results[start:start + columns_per_row]):
			with col:
				poster = movie.get("poster_url") or ""  # relative URLs are the browser page placeholder
				st.image(poster if poster.startswith("http") else NO_POSTER_URL)  # poster
				st.markdown(f"**{movie['title']}**")  # title
				rating = f"{movie['vote_average']:.1f}" if movie.get("vote_average") else "N/A"  # one decimal
				year = (movie.get("release_date") or "").split("-")[0] or "N/A"  # release year
				st.caption(f"⭐ {rating} • {movie.get('original_language') or ''} • {year}")  # details row

# Show a footer indicator of current mode
st.sidebar.markdown("---")  # separator
st.sidebar.caption("Mode: API client (ensure uvicorn api:app --reload is running)")  # mode label
