"""Project builders for NPM, Maven and Gradle, and the factory that picks one."""